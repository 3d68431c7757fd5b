"""Utility subpackage."""

from .backoff_logger import get_logger, setup_logging, with_retry
from .dates import parse_date, to_iso

__all__ = [
    "get_logger",
    "setup_logging",
    "with_retry",
    "parse_date",
    "to_iso",
]
