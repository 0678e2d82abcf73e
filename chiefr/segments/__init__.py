"""
Segment ownership resolution.

Matches the file patches of a changeset against the configured segments
and aggregates owners, topics and target repositories.
"""

from chiefr.segments.matcher import is_concerned, is_content_match, is_file_name_match
from chiefr.segments.models import Segment, describe_segment
from chiefr.segments.resolver import (
    Resolution,
    collect_chiefs,
    collect_topics,
    distinct_repositories,
    order_by_priority,
    require_owners,
    resolve,
)

__all__ = [
    "Segment",
    "describe_segment",
    "is_concerned",
    "is_content_match",
    "is_file_name_match",
    "Resolution",
    "resolve",
    "order_by_priority",
    "distinct_repositories",
    "collect_chiefs",
    "collect_topics",
    "require_owners",
]
