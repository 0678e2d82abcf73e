"""GitHub data schemas."""

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """GitHub user schema."""

    login: str
    id: int = 0


class GitHubLabel(BaseModel):
    """GitHub label schema."""

    name: str
    color: str | None = None


class GitHubIssue(BaseModel):
    """Issue returned by the assignees endpoint; pull requests are issues."""

    number: int
    title: str = ""
    state: str = "open"
    assignees: list[GitHubUser] = Field(default_factory=list)
    labels: list[GitHubLabel] = Field(default_factory=list)
    html_url: str = ""


class GitHubComment(BaseModel):
    """GitHub issue comment schema."""

    id: int
    body: str = ""
    html_url: str = ""


class GitHubPullRequest(BaseModel):
    """GitHub pull request schema."""

    number: int
    title: str = ""
    state: str  # "open", "closed"
    html_url: str = ""
