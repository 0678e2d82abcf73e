"""
Pull request update driver.

Given the segments resolved for a pull request, either assigns the chiefs
and labels the topics, or, when the pull request was opened against a
repository no segment owns, redirects it with a comment and closes it.
Calls are issued one after another and are not rolled back on failure.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable
from urllib.parse import urlparse

import structlog

from chiefr.errors import (
    InvalidPullRequestURLError,
    NoChiefsError,
    NoRepositoryError,
    NoSegmentsError,
)
from chiefr.segments.models import Segment
from chiefr.segments.resolver import collect_chiefs, collect_topics, order_by_priority
from chiefr.trackers.base import IssueTracker, PullRequestRef, PullRequestState

logger = structlog.get_logger()

_NUMBER = re.compile(r"[0-9]+")

REDIRECT_COMMENT = (
    "Thank you for your contribution! This pull request does not target the "
    "repository responsible for the files it changes. "
    "Please submit it to {repository} instead."
)


class UpdateAction(str, Enum):
    """What the driver did to the pull request."""

    ASSIGNED = "assigned"
    CLOSED = "closed"


@dataclass
class PullRequestUpdate:
    """Outcome of a pull request update."""

    action: UpdateAction
    pull_request: PullRequestRef
    repository: str
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)


def parse_pull_request_url(url: str) -> PullRequestRef:
    """Split a URL of the form {host}/{owner}/{repo}/pull/{number}."""
    parsed = urlparse(url)
    parts = parsed.path.split("/")
    if (
        not parsed.netloc
        or len(parts) != 5
        or parts[0] != ""
        or not parts[1]
        or not parts[2]
        or parts[3] != "pull"
        or not _NUMBER.fullmatch(parts[4])
    ):
        raise InvalidPullRequestURLError("Invalid pull request URL", url=url)

    return PullRequestRef(
        host=parsed.netloc,
        owner=parts[1],
        repo=parts[2],
        number=int(parts[4]),
    )


def find_target_repository(pr_url: str, segments: Iterable[Segment]) -> str:
    """First repository, in priority order, that prefixes the pull request URL."""
    for segment in order_by_priority(segments):
        if segment.repository and pr_url.startswith(segment.repository):
            return segment.repository
    return ""


async def update_pull_request(
    pr_url: str,
    segments: Iterable[Segment],
    tracker: IssueTracker,
    close_if_unowned: bool = False,
) -> PullRequestUpdate:
    """
    Route a pull request to the owners of the segments it touches.

    Args:
        pr_url: URL of the pull request
        segments: Segments resolved for the pull request's changeset
        tracker: Connected issue tracker client
        close_if_unowned: Comment and close when the pull request targets a
            repository no resolved segment owns

    Returns:
        PullRequestUpdate describing the mutations applied
    """
    ordered = order_by_priority(segments)
    if not ordered:
        raise NoSegmentsError(
            "No matching segments found for this patch. Please edit your maintainers file"
        )

    chiefs = collect_chiefs(ordered)
    if not chiefs:
        raise NoChiefsError("Chiefs not found for this pull request")

    pr = parse_pull_request_url(pr_url)
    topics = collect_topics(ordered)
    repository = find_target_repository(pr_url, ordered)

    if repository:
        if topics:
            await tracker.add_labels(pr, topics)
        else:
            logger.info("No topics to label", pull_request=str(pr))
        await tracker.add_assignees(pr, chiefs)

        logger.info(
            "Pull request assigned",
            pull_request=str(pr),
            labels=topics,
            assignees=chiefs,
        )
        return PullRequestUpdate(
            action=UpdateAction.ASSIGNED,
            pull_request=pr,
            repository=repository,
            labels=topics,
            assignees=chiefs,
        )

    if not close_if_unowned:
        raise NoRepositoryError(
            "No repository found for this pull request", url=pr_url
        )

    target = ordered[0].repository or next(
        (s.repository for s in ordered if s.repository), ""
    )
    if not target:
        raise NoRepositoryError(
            "No repository found for this pull request", url=pr_url
        )

    await tracker.create_comment(pr, REDIRECT_COMMENT.format(repository=target))
    await tracker.edit_state(pr, PullRequestState.CLOSED)

    logger.info("Pull request redirected and closed", pull_request=str(pr), target=target)
    return PullRequestUpdate(
        action=UpdateAction.CLOSED,
        pull_request=pr,
        repository=target,
    )
