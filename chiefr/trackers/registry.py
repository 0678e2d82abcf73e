"""Tracker selection by pull request URL."""

from urllib.parse import urlparse

import structlog

from chiefr.config import Settings
from chiefr.errors import UnsupportedTrackerError
from chiefr.trackers.base import IssueTracker, TrackerKind
from chiefr.trackers.github.connector import GitHubTracker

logger = structlog.get_logger()

_HOSTS = {
    "github.com": TrackerKind.GITHUB,
    "www.github.com": TrackerKind.GITHUB,
}


def tracker_kind_for_url(url: str) -> TrackerKind:
    """Pick the tracker kind from the host of a pull request URL."""
    host = (urlparse(url).hostname or "").lower()
    kind = _HOSTS.get(host)
    if kind is None:
        raise UnsupportedTrackerError(
            f"Cannot find project manager handler for url '{url}'", host=host
        )
    return kind


def create_tracker(kind: TrackerKind, token: str, settings: Settings) -> IssueTracker:
    """Build the tracker client for a tracker kind."""
    if kind is TrackerKind.GITHUB:
        return GitHubTracker(
            token=token,
            api_url=settings.github_api_url,
            timeout=settings.http_timeout,
        )
    raise UnsupportedTrackerError(f"No tracker client for '{kind.value}'")
