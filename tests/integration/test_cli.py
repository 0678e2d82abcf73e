"""Integration tests for the command line."""

import pytest

from chiefr.main import main
from tests.conftest import RecordingTracker, git

MAINTAINERS = r"""
[docs]
Chiefs = alice
Repository = https://x/docs
FilePatterns = .*\.md

[code]
Chiefs = bob
Repository = https://x/code
FilePatterns = .*\.go
Priority = 1
Topics = golang

[widgets]
Chiefs = carol
Repository = https://github.com/acme/widgets
ContentPatterns = TODO
Topics = triage
"""


@pytest.fixture
def project(git_repo):
    """Repository with a maintainers file beside it and a commit touching docs and code."""
    first = git(git_repo, "rev-parse", "HEAD")
    (git_repo.parent / ".maintainers.ini").write_text(MAINTAINERS)
    (git_repo / "README.md").write_text("# Widgets\n\nMore docs\n")
    (git_repo / "main.go").write_text("package main\n")
    git(git_repo, "add", "-A")
    git(git_repo, "commit", "-q", "-m", "docs and code")
    return git_repo, first


def run(project_path, *args):
    return main(
        ["-m", str(project_path.parent / ".maintainers.ini"), "-C", str(project_path), *args]
    )


class TestList:
    """Tests for the list command."""

    def test_lists_all_by_priority(self, project, capsys):
        path, _ = project

        assert run(path, "list") == 0

        out = capsys.readouterr().out
        assert out.index("[code]") < out.index("[docs]") < out.index("[widgets]")

    def test_path_filter(self, project, capsys):
        path, _ = project

        assert run(path, "list", "guide.md") == 0

        out = capsys.readouterr().out
        assert "[docs]" in out
        assert "[code]" not in out

    def test_path_filter_without_match(self, project, capsys):
        path, _ = project
        assert run(path, "list", "Makefile") == 5


class TestSubmit:
    """Tests for the submit command."""

    def test_lists_repositories_by_priority(self, project, capsys):
        path, first = project

        assert run(path, "submit", first) == 0

        out = capsys.readouterr().out
        assert "Please submit your patch to one of the following repositories:" in out
        assert out.index(" - https://x/code") < out.index(" - https://x/docs")
        assert "https://github.com/acme/widgets" not in out

    def test_nothing_to_submit(self, project, capsys):
        path, _ = project
        assert run(path, "submit", "HEAD") == 4
        assert "Nothing to submit" in capsys.readouterr().err

    def test_no_owner(self, project, capsys):
        path, _ = project
        head = git(path, "rev-parse", "HEAD")
        (path / "Makefile").write_text("all:\n")
        git(path, "add", "-A")
        git(path, "commit", "-q", "-m", "build")

        assert run(path, "submit", head) == 5
        assert "No matching segments" in capsys.readouterr().err

    def test_unknown_revision(self, project):
        path, _ = project
        assert run(path, "submit", "no-such-branch") == 3

    def test_invalid_maintainers(self, project, capsys):
        path, first = project
        (path.parent / ".maintainers.ini").write_text("[docs]\nChiefs =\n")

        assert run(path, "submit", first) == 1
        assert "missing 'Chiefs'" in capsys.readouterr().err


class TestUpdatePullRequest:
    """Tests for the update-pull-request command."""

    PR_URL = "https://github.com/acme/widgets/pull/42"

    @pytest.fixture
    def tracker(self, monkeypatch):
        tracker = RecordingTracker()
        monkeypatch.setattr("chiefr.main.create_tracker", lambda kind, token, settings: tracker)
        return tracker

    @pytest.fixture
    def todo_commit(self, project):
        path, _ = project
        head = git(path, "rev-parse", "HEAD")
        (path / "notes.txt").write_text("TODO: triage\n")
        git(path, "add", "-A")
        git(path, "commit", "-q", "-m", "notes")
        return path, head

    def test_assigns_owners(self, todo_commit, tracker, capsys):
        path, head = todo_commit

        assert run(path, "update-pull-request", head, self.PR_URL, "token") == 0

        assert [(name, payload) for name, _, payload in tracker.calls] == [
            ("add_labels", ["triage"]),
            ("add_assignees", ["carol"]),
        ]
        assert "acme/widgets#42 assigned to carol" in capsys.readouterr().out

    def test_unowned_fails_without_calls(self, project, tracker):
        path, first = project

        assert run(path, "update-pull-request", first, self.PR_URL, "token") == 7
        assert tracker.calls == []

    def test_unowned_closes(self, project, tracker):
        path, first = project

        code = run(
            path, "update-pull-request", first, self.PR_URL, "token", "--close-if-unowned"
        )

        assert code == 0
        assert [name for name, _, _ in tracker.calls] == ["create_comment", "edit_state"]
        assert "https://x/code" in tracker.calls[0][2]

    def test_token_from_environment(self, todo_commit, tracker, monkeypatch):
        path, head = todo_commit
        monkeypatch.setenv("CHIEFR_GITHUB_TOKEN", "env-token")

        assert run(path, "update-pull-request", head, self.PR_URL) == 0

    def test_missing_token(self, todo_commit, tracker):
        path, head = todo_commit
        assert run(path, "update-pull-request", head, self.PR_URL) == 11

    def test_unsupported_tracker(self, project):
        path, first = project
        url = "https://gitlab.com/acme/widgets/pull/42"
        assert run(path, "update-pull-request", first, url, "token") == 10

    def test_invalid_url(self, project, tracker):
        path, first = project
        url = "https://github.com/acme/widgets/issues/42"
        assert run(path, "update-pull-request", first, url, "token") == 6
