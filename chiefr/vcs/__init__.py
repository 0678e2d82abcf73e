"""Git changeset adapter."""

from chiefr.vcs.git import GitRepository, parse_diff
from chiefr.vcs.models import Chunk, ChunkType, FilePatch

__all__ = [
    "GitRepository",
    "parse_diff",
    "Chunk",
    "ChunkType",
    "FilePatch",
]
