"""
Pattern matcher - decides whether a file patch concerns a segment.

File name rules are checked first; content rules are only consulted when
no file name rule accepts the path. A malformed regular expression never
matches and is reported once as a warning, the remaining patterns are
still evaluated.
"""

import re
from functools import lru_cache
from typing import Iterable

import structlog

from chiefr.segments.models import Segment
from chiefr.vcs.models import FilePatch

logger = structlog.get_logger()


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str, flags: int = 0) -> re.Pattern | None:
    """Compile a pattern, returning None if it is not a valid regex."""
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        logger.warning("Invalid pattern ignored", pattern=pattern, error=str(e))
        return None


def _search(pattern: str, text: str, flags: int = 0) -> bool:
    compiled = compile_pattern(pattern, flags)
    return compiled is not None and compiled.search(text) is not None


def _accepts(
    includes: Iterable[str],
    excludes: Iterable[str],
    text: str,
    flags: int = 0,
) -> bool:
    if not any(_search(p, text, flags) for p in includes):
        return False
    return not any(_search(p, text, flags) for p in excludes)


def is_file_name_match(segment: Segment, path: str) -> bool:
    """True if an include pattern finds the path and no exclude pattern does."""
    return _accepts(segment.file_patterns, segment.file_exclude_patterns, path)


def is_content_match(segment: Segment, text: str) -> bool:
    """True if an include pattern occurs on any line and no exclude pattern does."""
    return _accepts(
        segment.content_patterns,
        segment.content_exclude_patterns,
        text,
        re.MULTILINE,
    )


def is_concerned(segment: Segment, patch: FilePatch, path: str | None = None) -> bool:
    """Check whether a file patch belongs to a segment.

    Args:
        segment: Segment whose rules are evaluated
        patch: File patch from the changeset
        path: Path to match; defaults to the patch's effective path
            (the old path for a deletion)

    Returns:
        True on a file name match, otherwise the result of the content match
        over the concatenated text of all chunks.
    """
    if path is None:
        path = patch.effective_path

    if is_file_name_match(segment, path):
        return True

    if not segment.content_patterns:
        return False
    return is_content_match(segment, patch.content)
