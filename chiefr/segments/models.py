"""Segment schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def split_list(value: Any) -> list[str]:
    """Accept a comma separated string or a list; strip and drop empty items."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip() for item in value if str(item).strip()]


def unique(items: list[str]) -> list[str]:
    """De-duplicate keeping first occurrence order."""
    return list(dict.fromkeys(items))


class Segment(BaseModel):
    """A named slice of the project with its own owners and matching rules."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)

    # Where patches for this segment should be submitted
    repository: str = ""

    # Members
    chiefs: list[str]
    reviewers: list[str] = Field(default_factory=list)

    # Matching rules (regular expressions)
    file_patterns: list[str] = Field(default_factory=list)
    file_exclude_patterns: list[str] = Field(default_factory=list)
    content_patterns: list[str] = Field(default_factory=list)
    content_exclude_patterns: list[str] = Field(default_factory=list)

    priority: int = 0
    topics: list[str] = Field(default_factory=list)

    # Display-only resources
    chat: str = ""
    mail_list: str = ""
    issue_tracker: str = ""

    @field_validator(
        "chiefs",
        "reviewers",
        "file_patterns",
        "file_exclude_patterns",
        "content_patterns",
        "content_exclude_patterns",
        "topics",
        mode="before",
    )
    @classmethod
    def _split(cls, value: Any) -> list[str]:
        return split_list(value)

    @field_validator("chiefs", "reviewers", "topics")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return unique(value)

    @field_validator("chiefs")
    @classmethod
    def _require_chiefs(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("missing 'Chiefs' property")
        return value

    @field_validator("repository", "chat", "mail_list", "issue_tracker", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.name == other.name


def describe_segment(segment: Segment) -> str:
    """Render a segment as a human readable block."""
    lines = [
        f"[{segment.name}]",
        f" Chiefs: {', '.join(segment.chiefs)}",
        f" Priority: {segment.priority}",
    ]
    optional = [
        ("Topics", ", ".join(segment.topics)),
        ("Reviewers", ", ".join(segment.reviewers)),
        ("Repository", segment.repository),
        ("Issue tracker", segment.issue_tracker),
        ("Mailing list", segment.mail_list),
        ("Chat", segment.chat),
        ("File patterns", ", ".join(segment.file_patterns)),
        ("Content patterns", ", ".join(segment.content_patterns)),
        ("File exclude patterns", ", ".join(segment.file_exclude_patterns)),
        ("Content exclude patterns", ", ".join(segment.content_exclude_patterns)),
    ]
    lines.extend(f" {label}: {value}" for label, value in optional if value)
    return "\n".join(lines) + "\n"
