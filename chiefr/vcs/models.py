"""Changeset data structures produced by the git adapter."""

from dataclasses import dataclass, field
from enum import IntEnum


class ChunkType(IntEnum):
    """Kind of lines held by a diff chunk."""

    EQUAL = 0
    ADD = 1
    DELETE = 2


@dataclass(frozen=True)
class Chunk:
    """A run of consecutive diff lines of the same kind."""

    type: ChunkType
    content: str


@dataclass
class FilePatch:
    """One file's diff within a changeset."""

    from_path: str | None = None  # None for an added file
    to_path: str | None = None  # None for a deleted file
    chunks: list[Chunk] = field(default_factory=list)

    @property
    def is_deletion(self) -> bool:
        return self.to_path is None

    @property
    def effective_path(self) -> str:
        """Path the patch is attributed to; the old path for a deletion."""
        path = self.from_path if self.to_path is None else self.to_path
        return path or ""

    @property
    def content(self) -> str:
        """Text of every chunk (equal, added and deleted) in chunk order."""
        return "".join(chunk.content for chunk in self.chunks)
