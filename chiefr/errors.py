"""
Exception classes for chiefr.

Every error carries the process exit code the command line maps it to, so
each failure class is distinguishable by the caller.
"""

from typing import Any


class ChiefrError(Exception):
    """Base exception for all chiefr errors."""

    exit_code = 1

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context for log output
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            "context": self.context,
        }


class ConfigurationError(ChiefrError):
    """Maintainers file is unreadable or holds an invalid segment."""

    exit_code = 1


class ResolutionInputError(ChiefrError):
    """The changeset could not be produced from the repository."""

    exit_code = 3


class RepositoryError(ResolutionInputError):
    """Git repository missing, unreadable, or a git command failed."""
    pass


class RevisionNotFoundError(ResolutionInputError):
    """A revision name did not resolve to a commit."""
    pass


class NothingToSubmitError(ChiefrError):
    """The changeset touches no file."""

    exit_code = 4


class NoOwnerFoundError(ChiefrError):
    """Files changed but no segment claims any of them."""

    exit_code = 5


class NoSegmentsError(NoOwnerFoundError):
    """A pull request update was requested without resolved segments."""
    pass


class InvalidPullRequestURLError(ChiefrError):
    """Pull request URL is not {host}/{owner}/{repo}/pull/{number}."""

    exit_code = 6


class NoRepositoryError(ChiefrError):
    """No resolved segment's repository hosts the pull request."""

    exit_code = 7


class NoChiefsError(ChiefrError):
    """Segments were resolved but none of them names a chief."""

    exit_code = 8


class TrackerAPIError(ChiefrError):
    """A call to the issue tracker failed."""

    exit_code = 9


class UnsupportedTrackerError(ChiefrError):
    """No tracker handler exists for the pull request URL's host."""

    exit_code = 10


class MissingCredentialError(ChiefrError):
    """No API key was supplied for the tracker."""

    exit_code = 11
