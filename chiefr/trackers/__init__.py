"""Issue tracker clients and the pull request update driver."""

from chiefr.trackers.base import (
    IssueTracker,
    PullRequestRef,
    PullRequestState,
    TrackerKind,
)
from chiefr.trackers.driver import (
    PullRequestUpdate,
    UpdateAction,
    parse_pull_request_url,
    update_pull_request,
)
from chiefr.trackers.registry import create_tracker, tracker_kind_for_url

__all__ = [
    "IssueTracker",
    "PullRequestRef",
    "PullRequestState",
    "TrackerKind",
    "PullRequestUpdate",
    "UpdateAction",
    "parse_pull_request_url",
    "update_pull_request",
    "create_tracker",
    "tracker_kind_for_url",
]
