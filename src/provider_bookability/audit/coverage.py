"""Coverage views: which payers a provider takes, which providers a payer has."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ..load.loader import load_relationships
from ..models import NetworkStatus, Relationship, Scope, Snapshot
from ..transform.temporal import filter_relationships
from ..utils.dates import to_iso

UNKNOWN_PAYER = "Unknown Payer"
UNKNOWN_PROVIDER = "Unknown Provider"


@dataclass
class CoverageItem:
    id: str
    name: str
    network_status: NetworkStatus
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    bookable_from_date: Optional[date] = None
    supervising_attendings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "network_status": self.network_status.value,
            "effective_date": to_iso(self.effective_date),
            "expiration_date": to_iso(self.expiration_date),
            "bookable_from_date": to_iso(self.bookable_from_date),
            "supervising_attendings": list(self.supervising_attendings),
        }


def _in_force(snapshot: Snapshot, scope: Scope, reference_date: date,
              enforce_bookable_from: bool) -> List[Relationship]:
    candidates = load_relationships(snapshot, scope)
    return filter_relationships(
        candidates, reference_date, enforce_bookable_from=enforce_bookable_from
    ).relationships


def _attendings(rel: Relationship, provider_names: Dict[str, str]) -> List[str]:
    if rel.network_status is not NetworkStatus.SUPERVISED or not rel.billing_provider_id:
        return []
    return [provider_names.get(rel.billing_provider_id, UNKNOWN_PROVIDER)]


def coverage_for_provider(snapshot: Snapshot, provider_id: str, reference_date: date,
                          enforce_bookable_from: bool = True) -> List[CoverageItem]:
    """Payers ``provider_id`` can be booked against on ``reference_date``.

    Payer ids that do not resolve are listed as "Unknown Payer" rather than
    hidden.
    """
    payer_names = {p.id: p.name for p in snapshot.payers}
    provider_names = {p.id: p.display_name for p in snapshot.providers}
    return [
        CoverageItem(
            id=rel.payer_id,
            name=payer_names.get(rel.payer_id) or UNKNOWN_PAYER,
            network_status=rel.network_status,
            effective_date=rel.effective_date,
            expiration_date=rel.expiration_date,
            bookable_from_date=rel.bookable_from_date,
            supervising_attendings=_attendings(rel, provider_names),
        )
        for rel in _in_force(snapshot, Scope(provider_id=provider_id), reference_date, enforce_bookable_from)
    ]


def coverage_for_payer(snapshot: Snapshot, payer_id: str, reference_date: date,
                       enforce_bookable_from: bool = True) -> List[CoverageItem]:
    """Providers bookable for ``payer_id`` on ``reference_date``."""
    provider_names = {p.id: p.display_name for p in snapshot.providers}
    return [
        CoverageItem(
            id=rel.provider_id,
            name=provider_names.get(rel.provider_id) or UNKNOWN_PROVIDER,
            network_status=rel.network_status,
            effective_date=rel.effective_date,
            expiration_date=rel.expiration_date,
            bookable_from_date=rel.bookable_from_date,
            supervising_attendings=_attendings(rel, provider_names),
        )
        for rel in _in_force(snapshot, Scope(payer_id=payer_id), reference_date, enforce_bookable_from)
    ]
