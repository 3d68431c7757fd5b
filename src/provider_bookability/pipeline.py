"""Loader -> temporal filter -> normalizer, over one snapshot."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .load.loader import load_relationships
from .models import Anomaly, AnomalyKind, BookableRecord, Scope, Snapshot
from .transform.normalize import attending_problem, inactive_rendering_provider, normalize_relationship
from .transform.temporal import ReferenceMode, filter_relationships, resolve_reference_date
from .utils.backoff_logger import get_logger

logger = get_logger(__name__)


@dataclass
class BookabilityResult:
    reference_date: date
    mode: ReferenceMode
    records: List[BookableRecord] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)

    def anomaly_counts(self) -> Dict[str, int]:
        counts = {kind.value: 0 for kind in AnomalyKind}
        for anomaly in self.anomalies:
            counts[anomaly.kind.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference_date": self.reference_date.isoformat(),
            "mode": self.mode.value,
            "records": [r.to_dict() for r in self.records],
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


def resolve_bookability(snapshot: Snapshot,
                        scope: Optional[Scope] = None,
                        *,
                        mode: Union[str, ReferenceMode] = ReferenceMode.AS_OF_TODAY,
                        service_date: Optional[date] = None,
                        today: Optional[date] = None,
                        enforce_bookable_from: bool = False) -> BookabilityResult:
    """Resolve which relationships in ``snapshot`` are bookable.

    Pure over its inputs: the same snapshot and reference date always give
    the same result. Relationships whose provider or payer does not exist
    are reported as anomalies and produce no record. A supervised
    relationship whose rendering provider is missing or inactive keeps its
    record and is reported as an orphaned provider.

    Args:
        snapshot: rows read at one logical point in time
        scope: provider/payer selector, full catalog when None
        mode: as of today or as of ``service_date``
        service_date: required for ``as_of_service_date``
        today: overrides the system clock for ``as_of_today``
        enforce_bookable_from: also honour ``bookable_from_date``

    Returns:
        BookabilityResult with records and anomalies
    """
    mode = ReferenceMode(mode)
    reference_date = resolve_reference_date(mode, service_date=service_date, today=today)

    providers = snapshot.providers_by_id()
    payers = snapshot.payers_by_id()

    candidates = load_relationships(snapshot, scope)
    filtered = filter_relationships(
        candidates,
        reference_date,
        provider_ids=providers.keys(),
        payer_ids=payers.keys(),
        enforce_bookable_from=enforce_bookable_from,
    )

    result = BookabilityResult(
        reference_date=reference_date,
        mode=mode,
        anomalies=list(filtered.anomalies),
    )

    for rel in filtered.relationships:
        provider = providers.get(rel.provider_id)
        payer = payers.get(rel.payer_id)
        if provider is None or payer is None:
            continue
        record = normalize_relationship(rel, provider, payer, providers)
        if record.unsupervised_orphan:
            result.anomalies.append(Anomaly(
                kind=AnomalyKind.UNSUPERVISED_ORPHAN,
                provider_id=rel.provider_id,
                payer_id=rel.payer_id,
                network_status=rel.network_status,
                relationship_ids=(rel.ref,),
                detail=attending_problem(rel, providers) or "",
            ))
        inactive_id = inactive_rendering_provider(rel, providers)
        if inactive_id is not None:
            result.anomalies.append(Anomaly(
                kind=AnomalyKind.ORPHANED_PROVIDER,
                provider_id=rel.provider_id,
                payer_id=rel.payer_id,
                network_status=rel.network_status,
                relationship_ids=(rel.ref,),
                detail=f"rendering provider {inactive_id} is inactive",
            ))
        result.records.append(record)

    logger.info(
        "bookability_resolved",
        reference_date=reference_date.isoformat(),
        mode=mode.value,
        provider_id=scope.provider_id if scope else None,
        payer_id=scope.payer_id if scope else None,
        candidates=len(candidates),
        records=len(result.records),
        anomalies=len(result.anomalies),
    )
    return result
