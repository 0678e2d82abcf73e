"""
Resolution engine - maps a changeset to the segments responsible for it.

Resolved segments are kept in configuration order; priority ordering is
applied where the result is displayed or acted upon.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import structlog

from chiefr.errors import NoOwnerFoundError, NothingToSubmitError
from chiefr.segments.matcher import is_concerned
from chiefr.segments.models import Segment, unique
from chiefr.vcs.models import FilePatch

logger = structlog.get_logger()


@dataclass
class Resolution:
    """Segments concerned by a changeset and the paths it touches."""

    segments: dict[str, Segment] = field(default_factory=dict)
    paths: list[str] = field(default_factory=list)

    def ordered(self) -> list[Segment]:
        """Segments sorted for display, highest priority first."""
        return order_by_priority(self.segments.values())


def resolve(
    segments: Mapping[str, Segment],
    patches: Iterable[FilePatch],
) -> Resolution:
    """
    Resolve the segments concerned by a changeset.

    Args:
        segments: Configured segments by name, in configuration order
        patches: File patches of the changeset

    Returns:
        Resolution with matched segments (configuration order) and the
        affected paths (first-seen order)
    """
    matched: set[str] = set()
    paths: list[str] = []

    for patch in patches:
        path = patch.effective_path
        if path not in paths:
            paths.append(path)
        for name, segment in segments.items():
            if name not in matched and is_concerned(segment, patch, path):
                matched.add(name)

    resolution = Resolution(
        segments={name: s for name, s in segments.items() if name in matched},
        paths=paths,
    )

    logger.info(
        "Changeset resolved",
        paths=len(resolution.paths),
        segments=list(resolution.segments),
    )
    return resolution


def order_by_priority(segments: Iterable[Segment]) -> list[Segment]:
    """Stable sort by descending priority; ties keep their input order."""
    return sorted(segments, key=lambda s: -s.priority)


def distinct_repositories(segments: Iterable[Segment]) -> list[str]:
    """Non-empty repositories in priority order, duplicates removed."""
    return unique([s.repository for s in order_by_priority(segments) if s.repository])


def collect_chiefs(segments: Iterable[Segment]) -> list[str]:
    """Union of chiefs in priority order, duplicates removed."""
    return unique([c for s in order_by_priority(segments) for c in s.chiefs])


def collect_topics(segments: Iterable[Segment]) -> list[str]:
    """Union of topics in priority order, duplicates removed."""
    return unique([t for s in order_by_priority(segments) for t in s.topics])


def require_owners(resolution: Resolution) -> list[Segment]:
    """Return the ordered segments or raise the matching no-match error."""
    if not resolution.paths:
        raise NothingToSubmitError("Nothing to submit: the changeset touches no file")
    if not resolution.segments:
        raise NoOwnerFoundError(
            "No matching segments found for this patch. "
            "Please add a rule to your maintainers file",
            paths=resolution.paths,
        )
    return resolution.ordered()
