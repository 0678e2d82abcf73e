"""GitHub tracker implementation."""

from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from chiefr.errors import TrackerAPIError
from chiefr.trackers.base import (
    IssueTracker,
    PullRequestRef,
    PullRequestState,
    TrackerKind,
)
from chiefr.trackers.github.schemas import (
    GitHubComment,
    GitHubIssue,
    GitHubLabel,
    GitHubPullRequest,
)

logger = structlog.get_logger()


class GitHubTracker(IssueTracker):
    """Issue tracker backed by the GitHub REST API.

    Provides:
    - Labelling and assigning pull requests (issues endpoints)
    - Commenting on pull requests
    - Closing or reopening pull requests
    """

    kind = TrackerKind.GITHUB

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(token)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the authenticated HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "Authorization": f"Bearer {self._token}",
            },
            timeout=self.timeout,
            transport=self._transport,
        )
        self._connected = True
        logger.info("GitHub tracker connected", api_url=self.api_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._connected = False

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any],
        action: str,
        schema: Any,
    ) -> Any:
        """Send one request and parse the body into ``schema``.

        Transport errors, error statuses and bodies that are not the expected
        JSON all become a TrackerAPIError.
        """
        if not self._client:
            raise TrackerAPIError(f"Failed to {action}: GitHub tracker is not connected")

        try:
            response = await self._client.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TrackerAPIError(
                f"Failed to {action}: {e.response.status_code} {e.response.text}",
                path=path,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TrackerAPIError(f"Failed to {action}: {e}", path=path) from e

        try:
            data = TypeAdapter(schema).validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise TrackerAPIError(
                f"Failed to {action}: unexpected response body: {e}",
                path=path,
                status_code=response.status_code,
            ) from e

        logger.info("GitHub call succeeded", method=method, path=path)
        return data

    async def add_labels(self, pr: PullRequestRef, labels: list[str]) -> list[GitHubLabel]:
        """Add labels to a pull request."""
        return await self._request(
            "POST",
            f"/repos/{pr.owner}/{pr.repo}/issues/{pr.number}/labels",
            {"labels": labels},
            "add labels to pull request",
            list[GitHubLabel],
        )

    async def add_assignees(self, pr: PullRequestRef, assignees: list[str]) -> GitHubIssue:
        """Add assignees to a pull request."""
        return await self._request(
            "POST",
            f"/repos/{pr.owner}/{pr.repo}/issues/{pr.number}/assignees",
            {"assignees": assignees},
            "add assignees to pull request",
            GitHubIssue,
        )

    async def create_comment(self, pr: PullRequestRef, body: str) -> GitHubComment:
        """Post a comment on a pull request."""
        return await self._request(
            "POST",
            f"/repos/{pr.owner}/{pr.repo}/issues/{pr.number}/comments",
            {"body": body},
            "comment on pull request",
            GitHubComment,
        )

    async def edit_state(
        self, pr: PullRequestRef, state: PullRequestState
    ) -> GitHubPullRequest:
        """Open or close a pull request."""
        return await self._request(
            "PATCH",
            f"/repos/{pr.owner}/{pr.repo}/pulls/{pr.number}",
            {"state": state.value},
            f"set pull request state to {state.value}",
            GitHubPullRequest,
        )
