"""Date coercion helpers shared by the row boundary and the exporters."""

from datetime import date, datetime
from typing import Any, Optional


def parse_date(value: Any) -> Optional[date]:
    """Coerce a date-ish value into a ``datetime.date``.

    Accepts ``date``, ``datetime`` (date part kept), ISO ``YYYY-MM-DD``
    strings and ISO timestamps. ``None`` and blank strings map to ``None``.

    Raises:
        ValueError: if the value cannot be read as a date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # timestamps must parse whole; trailing junk is not a date
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Unsupported date value: {value!r}")


def to_iso(value: Optional[date]) -> Optional[str]:
    """Render a date as ``YYYY-MM-DD`` or pass ``None`` through."""
    return value.isoformat() if value is not None else None
