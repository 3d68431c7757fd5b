"""As-of-date filtering of provider/payer relationships."""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import AbstractSet, Dict, List, Optional, Sequence, Tuple

from ..models import Anomaly, AnomalyKind, NetworkStatus, Relationship
from ..utils.backoff_logger import get_logger

logger = get_logger(__name__)


class ReferenceMode(str, Enum):
    AS_OF_TODAY = "as_of_today"
    AS_OF_SERVICE_DATE = "as_of_service_date"


def resolve_reference_date(mode: ReferenceMode,
                           service_date: Optional[date] = None,
                           today: Optional[date] = None) -> date:
    """Pick the date relationships are evaluated against.

    The system clock is read only for ``AS_OF_TODAY`` when ``today`` is not
    supplied.

    Raises:
        ValueError: ``AS_OF_SERVICE_DATE`` without a ``service_date``
    """
    mode = ReferenceMode(mode)
    if mode is ReferenceMode.AS_OF_SERVICE_DATE:
        if service_date is None:
            raise ValueError("service_date is required when mode is as_of_service_date")
        return service_date
    return today if today is not None else date.today()


def is_bookable(rel: Relationship, on: date) -> bool:
    """True iff the relationship's contract is in force on ``on``."""
    if rel.effective_date is None or rel.effective_date > on:
        return False
    return rel.expiration_date is None or rel.expiration_date >= on


def is_schedulable(rel: Relationship, on: date) -> bool:
    """``is_bookable`` and past the bookable-from date, if one is set."""
    if not is_bookable(rel, on):
        return False
    return rel.bookable_from_date is None or rel.bookable_from_date <= on


@dataclass
class FilterResult:
    """Relationships usable on ``reference_date`` plus what looked wrong."""

    reference_date: date
    relationships: List[Relationship] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)

    def anomalies_of(self, kind: AnomalyKind) -> List[Anomaly]:
        return [a for a in self.anomalies if a.kind is kind]


def _flag(kind: AnomalyKind, rel: Relationship, detail: str) -> Anomaly:
    return Anomaly(
        kind=kind,
        provider_id=rel.provider_id,
        payer_id=rel.payer_id,
        network_status=rel.network_status,
        relationship_ids=(rel.ref,),
        detail=detail,
    )


def filter_relationships(relationships: Sequence[Relationship],
                         reference_date: date,
                         *,
                         provider_ids: Optional[AbstractSet[str]] = None,
                         payer_ids: Optional[AbstractSet[str]] = None,
                         enforce_bookable_from: bool = False) -> FilterResult:
    """Keep the relationships in force on ``reference_date``.

    Nothing is dropped silently: rows without an effective date are excluded
    and reported, orphaned provider/payer ids (a supervised row's rendering
    provider included) are reported but kept, and more than one passing
    relationship for the same (provider, payer, status) is reported with
    every member kept.

    Args:
        relationships: loader output
        reference_date: date to evaluate against
        provider_ids: known provider ids; orphan checks are skipped when None
        payer_ids: known payer ids; orphan checks are skipped when None
        enforce_bookable_from: also require ``bookable_from_date <= reference_date``

    Returns:
        FilterResult with passing relationships in input order
    """
    check = is_schedulable if enforce_bookable_from else is_bookable
    result = FilterResult(reference_date=reference_date)
    groups: "OrderedDict[Tuple[str, str, NetworkStatus], List[Relationship]]" = OrderedDict()

    for rel in relationships:
        if rel.effective_date is None:
            result.anomalies.append(_flag(
                AnomalyKind.MISSING_EFFECTIVE_DATE, rel,
                "relationship has no effective date and is never bookable",
            ))
        if provider_ids is not None and rel.provider_id not in provider_ids:
            result.anomalies.append(_flag(
                AnomalyKind.ORPHANED_PROVIDER, rel,
                f"provider {rel.provider_id} does not exist",
            ))
        rendering_id = rel.rendering_provider_id
        if (provider_ids is not None
                and rel.network_status is NetworkStatus.SUPERVISED
                and rendering_id
                and rendering_id != rel.provider_id
                and rendering_id not in provider_ids):
            result.anomalies.append(_flag(
                AnomalyKind.ORPHANED_PROVIDER, rel,
                f"rendering provider {rendering_id} does not exist",
            ))
        if payer_ids is not None and rel.payer_id not in payer_ids:
            result.anomalies.append(_flag(
                AnomalyKind.ORPHANED_PAYER, rel,
                f"payer {rel.payer_id} does not exist",
            ))

        if check(rel, reference_date):
            result.relationships.append(rel)
            groups.setdefault(rel.key, []).append(rel)

    for (provider_id, payer_id, status), members in groups.items():
        if len(members) < 2:
            continue
        result.anomalies.append(Anomaly(
            kind=AnomalyKind.DUPLICATE,
            provider_id=provider_id,
            payer_id=payer_id,
            network_status=status,
            relationship_ids=tuple(m.ref for m in members),
            detail=f"{len(members)} relationships in force on {reference_date.isoformat()}",
        ))

    _log_summary(result, len(relationships))
    return result


def _log_summary(result: FilterResult, candidates: int) -> None:
    counts: Dict[str, int] = {}
    for anomaly in result.anomalies:
        counts[anomaly.kind.value] = counts.get(anomaly.kind.value, 0) + 1
    logger.debug(
        "temporal_filter_applied",
        reference_date=result.reference_date.isoformat(),
        candidates=candidates,
        passed=len(result.relationships),
    )
    if counts:
        logger.warning("relationship_anomalies", reference_date=result.reference_date.isoformat(), **counts)
