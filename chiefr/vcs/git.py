"""Git adapter producing a changeset from the git command line."""

import re
import subprocess
from pathlib import Path

import structlog

from chiefr.errors import RepositoryError, RevisionNotFoundError
from chiefr.vcs.models import Chunk, ChunkType, FilePatch

logger = structlog.get_logger()

_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@")
_HEX_PREFIX = re.compile(r"^[0-9a-fA-F]{4,40}$")
_NULL_PATH = "/dev/null"

# Context large enough to carry every unchanged line of a file
WHOLE_FILE_CONTEXT = 100_000_000

_LINE_TYPES = {
    " ": ChunkType.EQUAL,
    "+": ChunkType.ADD,
    "-": ChunkType.DELETE,
}


class GitRepository:
    """A git work tree read through the ``git`` executable."""

    def __init__(self, path: str | Path = ".", context_lines: int | None = None):
        self.path = Path(path)
        self.context_lines = WHOLE_FILE_CONTEXT if context_lines is None else context_lines

    def _run(self, args: list[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command in the repository and return the completed process."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=str(self.path),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise RepositoryError(
                f"Failed to run git in '{self.path}': {e}", path=str(self.path)
            ) from e

        if check and result.returncode != 0:
            command = next((a for a in args if not a.startswith("-") and "=" not in a), "")
            raise RepositoryError(
                f"git {command} failed (exit {result.returncode}): {result.stderr.strip()}",
                path=str(self.path),
            )
        return result

    def open(self) -> "GitRepository":
        """Verify the path is inside a git work tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"], check=False)
        if result.returncode != 0 or result.stdout.strip() != "true":
            raise RepositoryError(
                f"Failed to open git repository: {self.path}",
                path=str(self.path),
                stderr=result.stderr.strip(),
            )
        return self

    def head(self) -> str:
        """Return the commit hash of HEAD."""
        result = self._run(["rev-parse", "--verify", "HEAD^{commit}"], check=False)
        if result.returncode != 0:
            raise RepositoryError(
                f"Failed to get HEAD of repository: {result.stderr.strip()}",
                path=str(self.path),
            )
        return result.stdout.strip()

    def _verify(self, name: str) -> str | None:
        result = self._run(
            ["rev-parse", "--verify", "--quiet", f"{name}^{{commit}}"], check=False
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def resolve_revision(self, revision: str) -> str:
        """Resolve a revision to a commit hash.

        Tried in order: a full or abbreviated hash found in the history of
        HEAD, any name git itself resolves, a local branch, then a
        remote-tracking ref.
        """
        if not revision:
            raise RevisionNotFoundError("Failed to resolve revision ''", revision=revision)

        if _HEX_PREFIX.match(revision):
            history = self._run(["rev-list", self.head()]).stdout.split()
            prefix = revision.lower()
            for sha in history:
                if sha.startswith(prefix):
                    return sha

        for name in (revision, f"refs/heads/{revision}", f"refs/remotes/{revision}"):
            sha = self._verify(name)
            if sha:
                return sha

        raise RevisionNotFoundError(
            f"Failed to resolve revision '{revision}'", revision=revision
        )

    def diff(self, from_commit: str, to_commit: str) -> list[FilePatch]:
        """Return the file patches between two commits."""
        result = self._run(
            [
                "-c",
                "core.quotePath=false",
                "diff",
                "--no-color",
                "--no-ext-diff",
                "--no-renames",
                f"--unified={self.context_lines}",
                from_commit,
                to_commit,
            ]
        )
        patches = parse_diff(result.stdout)
        logger.debug(
            "Computed changeset",
            from_commit=from_commit,
            to_commit=to_commit,
            files=len(patches),
        )
        return patches

    def changes_since(self, revision: str) -> list[FilePatch]:
        """Return the changeset from ``revision`` to HEAD."""
        self.open()
        head = self.head()
        first = self.resolve_revision(revision)
        return self.diff(first, head)


_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}


def _read_quoted(text: str) -> tuple[str, str]:
    """Decode a C-style quoted name at the start of ``text``.

    Returns the decoded name and whatever follows the closing quote. Octal
    escapes are raw bytes of a UTF-8 name.
    """
    raw = bytearray()
    i = 1
    while i < len(text):
        char = text[i]
        if char == '"':
            return raw.decode("utf-8", errors="surrogateescape"), text[i + 1:]
        if char == "\\" and i + 1 < len(text):
            escape = text[i + 1]
            if escape in _ESCAPES:
                raw.append(_ESCAPES[escape])
                i += 2
                continue
            octal = text[i + 1:i + 4]
            if len(octal) == 3 and all(c in "01234567" for c in octal):
                raw.append(int(octal, 8))
                i += 4
                continue
        raw.extend(char.encode("utf-8"))
        i += 1
    # Unterminated: keep the text as it is
    return text, ""


def _unquote(path: str) -> str:
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        name, rest = _read_quoted(path)
        if not rest:
            return name
    return path


def _without(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def _strip_prefix(path: str, prefix: str) -> str | None:
    path = _unquote(path.rstrip("\t"))
    if path == _NULL_PATH:
        return None
    return _without(path, prefix)


def _paths_from_header(rest: str) -> tuple[str, str]:
    """Split the ``a/<old> b/<new>`` part of a ``diff --git`` line.

    Either name may be C-quoted when it holds tabs, newlines, quotes or
    backslashes.
    """
    if rest.startswith('"'):
        old, tail = _read_quoted(rest)
        return _without(old, "a/"), _without(_unquote(tail.lstrip(" ")), "b/")
    if rest.endswith('"'):
        split = rest.rfind(' "b/')
        if split != -1:
            return _without(rest[:split], "a/"), _without(_unquote(rest[split + 1:]), "b/")
    # Same path on both sides: "a/P b/P"
    if rest.startswith("a/") and (len(rest) - 5) % 2 == 0:
        size = (len(rest) - 5) // 2
        old, sep, new = rest[2:2 + size], rest[2 + size:5 + size], rest[5 + size:]
        if sep == " b/" and old == new:
            return old, new
    old, _, new = rest.rpartition(" b/")
    return _without(old, "a/"), new


class _PatchBuilder:
    """Accumulates diff lines of one file into chunks."""

    def __init__(self, from_path: str | None, to_path: str | None):
        self.patch = FilePatch(from_path=from_path, to_path=to_path)
        self._type: ChunkType | None = None
        self._lines: list[str] = []

    def add_line(self, chunk_type: ChunkType, text: str) -> None:
        if chunk_type != self._type:
            self.flush()
            self._type = chunk_type
        self._lines.append(text + "\n")

    def flush(self) -> None:
        if self._type is not None and self._lines:
            self.patch.chunks.append(Chunk(type=self._type, content="".join(self._lines)))
        self._type = None
        self._lines = []

    def build(self) -> FilePatch:
        self.flush()
        return self.patch


def parse_diff(text: str) -> list[FilePatch]:
    """Parse ``git diff`` output into file patches.

    Consecutive lines of the same kind within a file form one chunk. Files
    without textual hunks (binary or mode-only changes) yield patches with
    no chunks.
    """
    patches: list[FilePatch] = []
    builder: _PatchBuilder | None = None
    old_left = new_left = 0

    for line in text.split("\n"):
        if old_left > 0 or new_left > 0:
            if line.startswith("\\"):
                continue
            chunk_type = _LINE_TYPES.get(line[:1], ChunkType.EQUAL)
            if chunk_type != ChunkType.ADD:
                old_left -= 1
            if chunk_type != ChunkType.DELETE:
                new_left -= 1
            builder.add_line(chunk_type, line[1:])
            continue

        if line.startswith("diff --git "):
            if builder is not None:
                patches.append(builder.build())
            old, new = _paths_from_header(line[len("diff --git "):])
            builder = _PatchBuilder(old, new)
        elif builder is None:
            continue
        elif line.startswith("new file mode"):
            builder.patch.from_path = None
        elif line.startswith("deleted file mode"):
            builder.patch.to_path = None
        elif line.startswith("--- "):
            builder.patch.from_path = _strip_prefix(line[4:], "a/")
        elif line.startswith("+++ "):
            builder.patch.to_path = _strip_prefix(line[4:], "b/")
        elif line.startswith("@@"):
            match = _HUNK_HEADER.match(line)
            if match:
                old_left = int(match.group(1) if match.group(1) is not None else 1)
                new_left = int(match.group(2) if match.group(2) is not None else 1)

    if builder is not None:
        patches.append(builder.build())
    return patches
