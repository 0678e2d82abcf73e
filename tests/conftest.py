"""Pytest fixtures and configuration."""

import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest

from chiefr.config import get_settings
from chiefr.errors import TrackerAPIError
from chiefr.segments.models import Segment
from chiefr.trackers.base import IssueTracker, PullRequestRef, PullRequestState
from chiefr.vcs.models import Chunk, ChunkType, FilePatch


def make_segment(name: str, **fields: Any) -> Segment:
    """Build a segment with a default chief."""
    fields.setdefault("chiefs", ["alice"])
    return Segment(name=name, **fields)


def make_patch(
    path: str | None = None,
    *chunks: tuple[ChunkType, str],
    from_path: str | None = None,
    deleted: bool = False,
) -> FilePatch:
    """Build a file patch; ``deleted`` moves ``path`` to the old side."""
    if deleted:
        return FilePatch(
            from_path=path,
            to_path=None,
            chunks=[Chunk(type=t, content=c) for t, c in chunks],
        )
    return FilePatch(
        from_path=from_path if from_path is not None else path,
        to_path=path,
        chunks=[Chunk(type=t, content=c) for t, c in chunks],
    )


class RecordingTracker(IssueTracker):
    """In-memory tracker recording every call in order."""

    def __init__(self, fail_on: str | None = None):
        super().__init__(token="test-token")
        self.calls: list[tuple[str, PullRequestRef, Any]] = []
        self.fail_on = fail_on

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    def _record(self, name: str, pr: PullRequestRef, payload: Any) -> None:
        if name == self.fail_on:
            raise TrackerAPIError(f"Failed to {name}: 500 boom")
        self.calls.append((name, pr, payload))

    async def add_labels(self, pr: PullRequestRef, labels: list[str]) -> Any:
        self._record("add_labels", pr, labels)

    async def add_assignees(self, pr: PullRequestRef, assignees: list[str]) -> Any:
        self._record("add_assignees", pr, assignees)

    async def create_comment(self, pr: PullRequestRef, body: str) -> Any:
        self._record("create_comment", pr, body)

    async def edit_state(self, pr: PullRequestRef, state: PullRequestState) -> Any:
        self._record("edit_state", pr, state)


@pytest.fixture
def tracker() -> RecordingTracker:
    return RecordingTracker()


@pytest.fixture
def docs_and_code() -> dict[str, Segment]:
    """Two segments: markdown docs and go code (higher priority)."""
    return {
        "docs": make_segment(
            "docs",
            file_patterns=[r".*\.md"],
            chiefs=["alice"],
            repository="https://x/docs",
            topics=["documentation"],
        ),
        "code": make_segment(
            "code",
            file_patterns=[r".*\.go"],
            chiefs=["bob"],
            repository="https://x/code",
            priority=1,
            topics=["golang"],
        ),
    }


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from CHIEFR_* variables and the settings cache."""
    for var in (
        "CHIEFR_MAINTAINERS_FILE",
        "CHIEFR_REPO_PATH",
        "CHIEFR_GITHUB_TOKEN",
        "CHIEFR_LOG_LEVEL",
        "CHIEFR_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A git repository with one initial commit on branch main."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")

    (repo / "README.md").write_text("# Widgets\n")
    (repo / "old.txt").write_text("obsolete\n")
    git(repo, "add", ".")
    git(repo, "commit", "-q", "-m", "initial")
    return repo
