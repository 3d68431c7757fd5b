"""Typed records for providers, payers and their relationships."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .utils.dates import to_iso


class NetworkStatus(str, Enum):
    """Status stored on a provider/payer relationship row."""

    IN_NETWORK = "in_network"
    SUPERVISED = "supervised"


class Via(str, Enum):
    """How a provider can be booked against a payer."""

    DIRECT = "direct"
    SUPERVISED = "supervised"


class SupervisionLevel(str, Enum):
    """Degree of attending involvement, lightest first."""

    SIGN_OFF_ONLY = "sign_off_only"
    FIRST_VISIT_IN_PERSON = "first_visit_in_person"
    CO_VISIT_REQUIRED = "co_visit_required"


class AnomalyKind(str, Enum):
    ORPHANED_PROVIDER = "orphaned_provider"
    ORPHANED_PAYER = "orphaned_payer"
    DUPLICATE = "duplicate"
    MISSING_EFFECTIVE_DATE = "missing_effective_date"
    UNSUPERVISED_ORPHAN = "unsupervised_orphan"


DEFAULT_LANGUAGES: Tuple[str, ...] = ("English",)


@dataclass(frozen=True)
class Relationship:
    """A time-bounded link between one provider and one payer."""

    provider_id: str
    payer_id: str
    network_status: NetworkStatus
    id: Optional[str] = None
    billing_provider_id: Optional[str] = None
    rendering_provider_id: Optional[str] = None
    supervision_level: Optional[SupervisionLevel] = None
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    bookable_from_date: Optional[date] = None

    @property
    def key(self) -> Tuple[str, str, NetworkStatus]:
        return (self.provider_id, self.payer_id, self.network_status)

    @property
    def ref(self) -> str:
        """Stable label used in anomaly reports when the row has no id."""
        if self.id:
            return self.id
        return (
            f"{self.provider_id}:{self.payer_id}:{self.network_status.value}"
            f"@{to_iso(self.effective_date) or 'none'}"
        )


@dataclass(frozen=True)
class Provider:
    id: str
    first_name: str = ""
    last_name: str = ""
    title: Optional[str] = None
    role: Optional[str] = None
    provider_type: Optional[str] = None
    is_active: bool = True
    is_bookable: bool = True
    accepts_new_patients: bool = True
    # Raw value as stored: a list, a JSON-encoded list or None
    languages_spoken: Any = field(default=None, compare=False)
    is_supervisor: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Payer:
    id: str
    name: str = ""
    payer_type: Optional[str] = None
    state: Optional[str] = None
    status_code: Optional[str] = None
    effective_date: Optional[date] = None
    projected_effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    requires_attending: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Relationships, providers and payers read at one logical point in time."""

    relationships: Tuple[Relationship, ...] = ()
    providers: Tuple[Provider, ...] = ()
    payers: Tuple[Payer, ...] = ()

    def providers_by_id(self) -> Dict[str, Provider]:
        return {p.id: p for p in self.providers}

    def payers_by_id(self) -> Dict[str, Payer]:
        return {p.id: p for p in self.payers}


@dataclass(frozen=True)
class Scope:
    """Selects one provider, one payer, both, or the whole catalog."""

    provider_id: Optional[str] = None
    payer_id: Optional[str] = None

    def matches(self, rel: Relationship) -> bool:
        if self.provider_id is not None and rel.provider_id != self.provider_id:
            return False
        if self.payer_id is not None and rel.payer_id != self.payer_id:
            return False
        return True

    @property
    def is_catalog(self) -> bool:
        return self.provider_id is None and self.payer_id is None


@dataclass(frozen=True)
class Anomaly:
    """A data-integrity defect found while resolving bookability."""

    kind: AnomalyKind
    provider_id: Optional[str]
    payer_id: Optional[str]
    network_status: Optional[NetworkStatus] = None
    relationship_ids: Tuple[str, ...] = ()
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "provider_id": self.provider_id,
            "payer_id": self.payer_id,
            "network_status": self.network_status.value if self.network_status else None,
            "relationship_ids": list(self.relationship_ids),
            "detail": self.detail,
        }


@dataclass(frozen=True)
class BookableRecord:
    """Canonical bookability row handed to booking, reporting and export."""

    provider_id: str
    payer_id: str
    via: Via
    network_status: NetworkStatus
    first_name: str = ""
    last_name: str = ""
    title: Optional[str] = None
    role: Optional[str] = None
    provider_type: Optional[str] = None
    is_active: bool = True
    is_bookable: bool = True
    accepts_new_patients: bool = True
    languages_spoken: Tuple[str, ...] = DEFAULT_LANGUAGES
    payer_name: str = ""
    payer_type: Optional[str] = None
    payer_state: Optional[str] = None
    attending_provider_id: Optional[str] = None
    rendering_provider_id: Optional[str] = None
    supervision_level: Optional[SupervisionLevel] = None
    requires_co_visit: bool = False
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    bookable_from_date: Optional[date] = None
    unsupervised_orphan: bool = False
    relationship_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        """Flat dict with ISO dates, suitable for JSON, CSV and parquet."""
        return {
            "provider_id": self.provider_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "title": self.title,
            "role": self.role,
            "provider_type": self.provider_type,
            "is_active": self.is_active,
            "is_bookable": self.is_bookable,
            "accepts_new_patients": self.accepts_new_patients,
            "languages_spoken": list(self.languages_spoken),
            "payer_id": self.payer_id,
            "payer_name": self.payer_name,
            "payer_type": self.payer_type,
            "payer_state": self.payer_state,
            "via": self.via.value,
            "network_status": self.network_status.value,
            "attending_provider_id": self.attending_provider_id,
            "rendering_provider_id": self.rendering_provider_id,
            "supervision_level": self.supervision_level.value if self.supervision_level else None,
            "requires_co_visit": self.requires_co_visit,
            "effective_date": to_iso(self.effective_date),
            "expiration_date": to_iso(self.expiration_date),
            "bookable_from_date": to_iso(self.bookable_from_date),
            "unsupervised_orphan": self.unsupervised_orphan,
            "relationship_id": self.relationship_id,
        }


def records_to_dicts(records: List[BookableRecord]) -> List[Dict[str, Any]]:
    return [r.to_dict() for r in records]
