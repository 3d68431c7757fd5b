"""Provider/payer bookability resolution."""

from .errors import BookabilityError, InvalidRowError, UnknownSourceError
from .models import (
    Anomaly,
    AnomalyKind,
    BookableRecord,
    NetworkStatus,
    Payer,
    Provider,
    Relationship,
    Scope,
    Snapshot,
    SupervisionLevel,
    Via,
)
from .pipeline import BookabilityResult, resolve_bookability
from .transform.temporal import ReferenceMode, is_bookable

__version__ = "0.1.0"

__all__ = [
    "Anomaly",
    "AnomalyKind",
    "BookabilityError",
    "BookabilityResult",
    "BookableRecord",
    "InvalidRowError",
    "NetworkStatus",
    "Payer",
    "Provider",
    "ReferenceMode",
    "Relationship",
    "Scope",
    "Snapshot",
    "SupervisionLevel",
    "UnknownSourceError",
    "Via",
    "is_bookable",
    "resolve_bookability",
]
