"""Logging setup."""

from chiefr.observability.logs import configure_logging

__all__ = ["configure_logging"]
