"""Maintainers file loading.

The maintainers file is an INI file with one section per segment::

    [docs]
    Chiefs = alice
    Repository = https://github.com/acme/docs
    FilePatterns = .*\\.md, docs/.*
    Priority = 1
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from pydantic import ValidationError

from chiefr.errors import ConfigurationError
from chiefr.segments.models import Segment

logger = structlog.get_logger()

# Keys before the first header land here; never a segment and never inherited
PREAMBLE_SECTION = "DEFAULT"
_NO_INHERITANCE = "\0chiefr-no-defaults"

# Normalized key (lowercase, no separators) -> Segment field
_KEY_FIELDS = {
    "repository": "repository",
    "chat": "chat",
    "maillist": "mail_list",
    "issuetracker": "issue_tracker",
    "chiefs": "chiefs",
    "reviewers": "reviewers",
    "filepatterns": "file_patterns",
    "contentpatterns": "content_patterns",
    "fileexcludepatterns": "file_exclude_patterns",
    "contentexcludepatterns": "content_exclude_patterns",
    "priority": "priority",
    "topics": "topics",
}


@dataclass
class MaintainersConfig:
    """Segments of a maintainers file, in file order."""

    segments: dict[str, Segment] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.segments)


def _normalize_key(key: str) -> str:
    return key.lower().replace("_", "").replace("-", "")


def _segment_from_section(name: str, section: configparser.SectionProxy) -> Segment:
    values: dict[str, str] = {}
    for key, value in section.items():
        field_name = _KEY_FIELDS.get(_normalize_key(key))
        if field_name is None:
            logger.warning("Unknown maintainers key ignored", section=name, key=key)
            continue
        values[field_name] = value

    if not values.get("chiefs", "").strip():
        raise ConfigurationError(
            f"Invalid config section '{name}': missing 'Chiefs' property",
            section=name,
        )

    try:
        return Segment(name=name, **values)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(
            f"Failed to parse config section '{name}': {errors}", section=name
        ) from e


def _with_leading_section(text: str) -> str:
    """Put keys written before the first header into the preamble section."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "#;":
            continue
        if stripped.startswith("["):
            return text
        return f"[{PREAMBLE_SECTION}]\n{text}"
    return text


def parse_maintainers(text: str, source: str = "<string>") -> MaintainersConfig:
    """Parse maintainers file content into segments."""
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=True,
        default_section=_NO_INHERITANCE,
    )
    try:
        parser.read_string(_with_leading_section(text), source=source)
    except configparser.Error as e:
        raise ConfigurationError(
            f"Failed to initialize maintainers: {e}", source=source
        ) from e

    config = MaintainersConfig()
    for name in parser.sections():
        if name == PREAMBLE_SECTION:
            continue
        config.segments[name] = _segment_from_section(name, parser[name])

    if not config.segments:
        logger.warning("No project segments defined", source=source)
    else:
        logger.debug("Maintainers loaded", source=source, segments=list(config.segments))
    return config


def load_maintainers(path: str | Path) -> MaintainersConfig:
    """Load and validate a maintainers file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Failed to initialize maintainers: {e}", path=str(path)
        ) from e
    return parse_maintainers(text, source=str(path))
