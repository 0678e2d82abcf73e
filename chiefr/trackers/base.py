"""Base classes for issue tracker clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TrackerKind(str, Enum):
    """Supported issue trackers."""

    GITHUB = "github"


class PullRequestState(str, Enum):
    """Pull request states a tracker can be asked to set."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class PullRequestRef:
    """A pull request addressed by (owner, repo, number)."""

    host: str
    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


class IssueTracker(ABC):
    """Base class for issue tracker clients.

    Each tracker provides:
    - A connection to the remote service, authenticated with a bearer token
    - The mutations needed to route a pull request to its owners
    """

    kind: TrackerKind

    def __init__(self, token: str):
        self._token = token
        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection to the remote service."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection to the remote service."""
        pass

    @property
    def is_connected(self) -> bool:
        """Check if tracker is connected."""
        return self._connected

    @abstractmethod
    async def add_labels(self, pr: PullRequestRef, labels: list[str]) -> Any:
        """Add labels to a pull request."""
        pass

    @abstractmethod
    async def add_assignees(self, pr: PullRequestRef, assignees: list[str]) -> Any:
        """Add assignees to a pull request."""
        pass

    @abstractmethod
    async def create_comment(self, pr: PullRequestRef, body: str) -> Any:
        """Post a comment on a pull request."""
        pass

    @abstractmethod
    async def edit_state(self, pr: PullRequestRef, state: PullRequestState) -> Any:
        """Open or close a pull request."""
        pass

    async def __aenter__(self) -> "IssueTracker":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()
