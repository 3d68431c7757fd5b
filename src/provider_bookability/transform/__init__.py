"""Temporal filtering, normalization and grouping stages."""

from .grouping import group_by_attending, supervision_summary, trainees_for
from .normalize import (
    filter_by_language,
    map_network_status_to_via,
    map_via_to_network_status,
    normalize_languages,
    normalize_relationship,
    requires_co_visit,
)
from .temporal import (
    FilterResult,
    ReferenceMode,
    filter_relationships,
    is_bookable,
    is_schedulable,
    resolve_reference_date,
)

__all__ = [
    "FilterResult",
    "ReferenceMode",
    "filter_by_language",
    "filter_relationships",
    "group_by_attending",
    "is_bookable",
    "is_schedulable",
    "map_network_status_to_via",
    "map_via_to_network_status",
    "normalize_languages",
    "normalize_relationship",
    "requires_co_visit",
    "resolve_reference_date",
    "supervision_summary",
    "trainees_for",
]
