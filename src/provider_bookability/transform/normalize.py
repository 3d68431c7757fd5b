"""Module for normalizing filtered relationships into bookability records."""

import json
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..models import (
    DEFAULT_LANGUAGES,
    BookableRecord,
    NetworkStatus,
    Payer,
    Provider,
    Relationship,
    SupervisionLevel,
    Via,
)

_STATUS_TO_VIA = {
    NetworkStatus.IN_NETWORK: Via.DIRECT,
    NetworkStatus.SUPERVISED: Via.SUPERVISED,
}
_VIA_TO_STATUS = {via: status for status, via in _STATUS_TO_VIA.items()}


def map_network_status_to_via(network_status: Union[str, NetworkStatus]) -> Via:
    """Map a stored ``network_status`` onto the ``via`` classification.

    Raises:
        ValueError: for anything outside ``{in_network, supervised}``
    """
    return _STATUS_TO_VIA[NetworkStatus(network_status)]


def map_via_to_network_status(via: Union[str, Via]) -> NetworkStatus:
    """Inverse of :func:`map_network_status_to_via`."""
    return _VIA_TO_STATUS[Via(via)]


def requires_co_visit(level: Optional[Union[str, SupervisionLevel]]) -> bool:
    if level is None:
        return False
    return SupervisionLevel(level) is SupervisionLevel.CO_VISIT_REQUIRED


def normalize_languages(languages: Any) -> List[str]:
    """Normalize a provider's ``languages_spoken`` into a list.

    The column arrives either as a list or as a JSON-encoded list string.
    A plain string that is not JSON is taken as a single language.

    Args:
        languages: raw column value

    Returns:
        List of language names, ``["English"]`` when the value is absent
    """
    if languages is None or languages == "":
        return list(DEFAULT_LANGUAGES)
    if isinstance(languages, (list, tuple)):
        return [str(lang) for lang in languages]
    if isinstance(languages, str):
        try:
            parsed = json.loads(languages)
        except ValueError:
            return [languages]
        if isinstance(parsed, list):
            return [str(lang) for lang in parsed]
        return [languages]
    return list(DEFAULT_LANGUAGES)


def attending_problem(rel: Relationship, providers_by_id: Mapping[str, Provider]) -> Optional[str]:
    """Explain why a supervised relationship has no usable attending.

    Returns:
        A human-readable reason, or None when the attending resolves
    """
    attending_id = rel.billing_provider_id
    if not attending_id:
        return "supervised relationship has no billing (attending) provider"
    rendering_id = rel.rendering_provider_id or rel.provider_id
    if attending_id == rendering_id:
        return f"provider {attending_id} cannot supervise themselves"
    attending = providers_by_id.get(attending_id)
    if attending is None:
        return f"attending provider {attending_id} does not exist"
    if not attending.is_active:
        return f"attending provider {attending_id} is inactive"
    return None


def inactive_rendering_provider(rel: Relationship,
                                providers_by_id: Mapping[str, Provider]) -> Optional[str]:
    """Rendering provider id of a supervised relationship when it exists but is inactive."""
    if rel.network_status is not NetworkStatus.SUPERVISED:
        return None
    rendering_id = rel.rendering_provider_id or rel.provider_id
    rendering = providers_by_id.get(rendering_id)
    if rendering is not None and not rendering.is_active:
        return rendering_id
    return None


def normalize_relationship(rel: Relationship,
                           provider: Provider,
                           payer: Payer,
                           providers_by_id: Mapping[str, Provider]) -> BookableRecord:
    """Build the canonical bookability record for one relationship.

    A supervised relationship whose attending cannot be resolved keeps
    ``via == supervised`` and is marked ``unsupervised_orphan``; it is never
    reported as direct.

    Args:
        rel: relationship that passed the temporal filter
        provider: the relationship's (rendering) provider
        payer: the relationship's payer
        providers_by_id: every provider in the snapshot, for attending lookup

    Returns:
        Normalized record
    """
    via = map_network_status_to_via(rel.network_status)

    if via is Via.SUPERVISED:
        level = rel.supervision_level or SupervisionLevel.SIGN_OFF_ONLY
        attending_id = rel.billing_provider_id
        rendering_id = rel.rendering_provider_id or rel.provider_id
        orphan = attending_problem(rel, providers_by_id) is not None
    else:
        level = None
        attending_id = None
        rendering_id = None
        orphan = False

    return BookableRecord(
        provider_id=provider.id,
        payer_id=payer.id,
        via=via,
        network_status=rel.network_status,
        first_name=provider.first_name,
        last_name=provider.last_name,
        title=provider.title,
        role=provider.role,
        provider_type=provider.provider_type,
        is_active=provider.is_active,
        is_bookable=provider.is_bookable,
        accepts_new_patients=provider.accepts_new_patients,
        languages_spoken=tuple(normalize_languages(provider.languages_spoken)),
        payer_name=payer.name,
        payer_type=payer.payer_type,
        payer_state=payer.state,
        attending_provider_id=attending_id,
        rendering_provider_id=rendering_id,
        supervision_level=level,
        requires_co_visit=requires_co_visit(level),
        effective_date=rel.effective_date,
        expiration_date=rel.expiration_date,
        bookable_from_date=rel.bookable_from_date,
        unsupervised_orphan=orphan,
        relationship_id=rel.id,
    )


def filter_by_language(records: Iterable[BookableRecord], language: Optional[str]) -> List[BookableRecord]:
    """Keep records whose provider speaks ``language``.

    English (or no language) keeps everything.
    """
    records = list(records)
    if not language or language.lower() == "english":
        return records
    wanted = language.lower()
    return [
        r for r in records
        if any(wanted in lang.lower() for lang in r.languages_spoken)
    ]

