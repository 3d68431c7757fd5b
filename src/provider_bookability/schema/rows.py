"""Boundary parsing for relationship, provider and payer rows."""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import InvalidRowError
from ..models import NetworkStatus, Payer, Provider, Relationship, SupervisionLevel
from ..utils.backoff_logger import get_logger
from ..utils.dates import parse_date

logger = get_logger(__name__)

_TRUE_STRINGS = {"true", "t", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "f", "0", "no", "n", ""}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flag(kind: str, row: Mapping[str, Any], name: str, default: bool) -> bool:
    value = row.get(name)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidRowError(kind, name, f"expected a boolean, got {value!r}", row)


def _date(kind: str, row: Mapping[str, Any], name: str):
    try:
        return parse_date(row.get(name))
    except ValueError as e:
        raise InvalidRowError(kind, name, str(e), row) from e


def _required(kind: str, row: Mapping[str, Any], name: str) -> str:
    value = _text(row.get(name))
    if value is None:
        raise InvalidRowError(kind, name, "missing required value", row)
    return value


def parse_relationship_row(row: Mapping[str, Any]) -> Relationship:
    """Parse one bookable-relationship row.

    Raises:
        InvalidRowError: unknown ``network_status`` or ``supervision_level``,
            missing ids, or unreadable dates.
    """
    kind = "relationship"
    raw_status = _text(row.get("network_status"))
    try:
        status = NetworkStatus(raw_status)
    except ValueError as e:
        raise InvalidRowError(
            kind, "network_status",
            f"expected one of {[s.value for s in NetworkStatus]}, got {raw_status!r}", row
        ) from e

    rendering_id = _text(row.get("rendering_provider_id"))
    provider_id = _text(row.get("provider_id"))
    if provider_id is None and status is NetworkStatus.SUPERVISED:
        provider_id = rendering_id
    if provider_id is None:
        raise InvalidRowError(kind, "provider_id", "missing required value", row)

    level = None
    if status is NetworkStatus.SUPERVISED:
        raw_level = _text(row.get("supervision_level"))
        if raw_level is None:
            level = SupervisionLevel.SIGN_OFF_ONLY
        else:
            try:
                level = SupervisionLevel(raw_level)
            except ValueError as e:
                raise InvalidRowError(
                    kind, "supervision_level",
                    f"expected one of {[s.value for s in SupervisionLevel]}, got {raw_level!r}", row
                ) from e
        rendering_id = rendering_id or provider_id

    return Relationship(
        provider_id=provider_id,
        payer_id=_required(kind, row, "payer_id"),
        network_status=status,
        id=_text(row.get("id")),
        billing_provider_id=_text(row.get("billing_provider_id")),
        rendering_provider_id=rendering_id,
        supervision_level=level,
        effective_date=_date(kind, row, "effective_date"),
        expiration_date=_date(kind, row, "expiration_date"),
        bookable_from_date=_date(kind, row, "bookable_from_date"),
    )


def parse_provider_row(row: Mapping[str, Any]) -> Provider:
    kind = "provider"
    return Provider(
        id=_required(kind, row, "id"),
        first_name=_text(row.get("first_name")) or "",
        last_name=_text(row.get("last_name")) or "",
        title=_text(row.get("title")),
        role=_text(row.get("role")),
        provider_type=_text(row.get("provider_type")),
        is_active=_flag(kind, row, "is_active", True),
        is_bookable=_flag(kind, row, "is_bookable", True),
        accepts_new_patients=_flag(kind, row, "accepts_new_patients", True),
        languages_spoken=row.get("languages_spoken"),
        is_supervisor=_flag(kind, row, "is_supervisor", False),
    )


def parse_payer_row(row: Mapping[str, Any]) -> Payer:
    kind = "payer"
    return Payer(
        id=_required(kind, row, "id"),
        name=_text(row.get("name")) or "",
        payer_type=_text(row.get("payer_type")),
        state=_text(row.get("state")),
        status_code=_text(row.get("status_code")),
        effective_date=_date(kind, row, "effective_date"),
        projected_effective_date=_date(kind, row, "projected_effective_date"),
        expiration_date=_date(kind, row, "expiration_date"),
        requires_attending=_flag(kind, row, "requires_attending", False),
    )


class RowValidator:
    """Parses raw rows in bulk, keeping rejected rows instead of aborting."""

    PARSERS: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
        "relationship": parse_relationship_row,
        "provider": parse_provider_row,
        "payer": parse_payer_row,
    }

    def __init__(self):
        self.logger = logger

    def partition(self, kind: str, rows: Iterable[Mapping[str, Any]]
                  ) -> Tuple[List[Any], List[InvalidRowError]]:
        """Split ``rows`` into parsed records and the errors for the rest.

        Args:
            kind: "relationship", "provider" or "payer"
            rows: raw mappings from a row source

        Returns:
            (parsed records, errors for rejected rows)
        """
        parser = self.PARSERS[kind]
        parsed: List[Any] = []
        rejected: List[InvalidRowError] = []
        for row in rows:
            try:
                parsed.append(parser(row))
            except InvalidRowError as e:
                self.logger.warning("row_rejected", kind=kind, field=e.field, error=str(e))
                rejected.append(e)
        if rejected:
            self.logger.warning("rows_rejected", kind=kind, rejected=len(rejected), parsed=len(parsed))
        return parsed, rejected

    def parse_all(self, kind: str, rows: Iterable[Mapping[str, Any]]) -> List[Any]:
        """Parse every row, raising on the first one that cannot be classified."""
        parser = self.PARSERS[kind]
        return [parser(row) for row in rows]
