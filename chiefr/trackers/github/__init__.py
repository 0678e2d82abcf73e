"""GitHub issue tracker."""

from chiefr.trackers.github.connector import GitHubTracker
from chiefr.trackers.github.schemas import (
    GitHubComment,
    GitHubIssue,
    GitHubLabel,
    GitHubPullRequest,
)

__all__ = [
    "GitHubTracker",
    "GitHubComment",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubPullRequest",
]
