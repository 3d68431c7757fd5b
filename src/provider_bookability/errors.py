"""Exceptions raised by provider_bookability.

Data anomalies (orphans, duplicates, missing dates) are never raised; they
are returned as :class:`provider_bookability.models.Anomaly` entries. The
classes here cover shape and usage failures only.
"""

from typing import Any, Mapping, Optional


class BookabilityError(Exception):
    """Base error for the package."""


class InvalidRowError(BookabilityError, ValueError):
    """A source row cannot be parsed into a typed record."""

    def __init__(self, kind: str, field: str, message: str,
                 row: Optional[Mapping[str, Any]] = None):
        self.kind = kind
        self.field = field
        self.row = dict(row) if row is not None else {}
        super().__init__(f"Invalid {kind} row ({field}): {message}")


class UnknownSourceError(BookabilityError, KeyError):
    """No row source is registered under the requested name."""

    def __init__(self, name: str, available):
        self.name = name
        self.available = sorted(available)
        super().__init__(f"Unknown row source '{name}'; available: {', '.join(self.available)}")

    def __str__(self):
        return self.args[0]
