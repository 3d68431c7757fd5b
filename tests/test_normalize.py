from datetime import date

import pytest

from provider_bookability.models import (
    NetworkStatus,
    Payer,
    Provider,
    Relationship,
    SupervisionLevel,
    Via,
)
from provider_bookability.transform.normalize import (
    filter_by_language,
    map_network_status_to_via,
    map_via_to_network_status,
    normalize_languages,
    normalize_relationship,
    requires_co_visit,
)

ATTENDING = Provider(id="A", first_name="Dana", last_name="Whitfield", is_supervisor=True)
RESIDENT = Provider(id="B", first_name="Luis", last_name="Moreno",
                    languages_spoken='["Spanish","English"]')
PAYER = Payer(id="X", name="Utah Medicaid", payer_type="medicaid", state="UT", status_code="approved")
PROVIDERS = {"A": ATTENDING, "B": RESIDENT}


def supervised(level=SupervisionLevel.CO_VISIT_REQUIRED, billing="A"):
    return Relationship(
        provider_id="B",
        payer_id="X",
        network_status=NetworkStatus.SUPERVISED,
        billing_provider_id=billing,
        rendering_provider_id="B",
        supervision_level=level,
        effective_date=date(2024, 1, 1),
    )


def test_normalize_languages():
    assert normalize_languages(["Spanish", "English"]) == ["Spanish", "English"]
    assert normalize_languages('["Spanish","English"]') == ["Spanish", "English"]
    assert normalize_languages(None) == ["English"]
    assert normalize_languages("") == ["English"]
    assert normalize_languages("Spanish") == ["Spanish"]
    assert normalize_languages('"Spanish"') == ['"Spanish"']
    assert normalize_languages(("French",)) == ["French"]


def test_status_via_mapping_is_closed():
    assert map_network_status_to_via("in_network") is Via.DIRECT
    assert map_network_status_to_via(NetworkStatus.SUPERVISED) is Via.SUPERVISED
    assert map_via_to_network_status("direct") is NetworkStatus.IN_NETWORK
    assert map_via_to_network_status(Via.SUPERVISED) is NetworkStatus.SUPERVISED
    with pytest.raises(ValueError):
        map_network_status_to_via("out_of_network")
    with pytest.raises(ValueError):
        map_via_to_network_status("referral")


def test_requires_co_visit():
    assert requires_co_visit("co_visit_required")
    assert not requires_co_visit(SupervisionLevel.SIGN_OFF_ONLY)
    assert not requires_co_visit(SupervisionLevel.FIRST_VISIT_IN_PERSON)
    assert not requires_co_visit(None)


def test_supervised_co_visit_record():
    record = normalize_relationship(supervised(), RESIDENT, PAYER, PROVIDERS)

    assert record.via is Via.SUPERVISED
    assert record.attending_provider_id == "A"
    assert record.rendering_provider_id == "B"
    assert record.supervision_level is SupervisionLevel.CO_VISIT_REQUIRED
    assert record.requires_co_visit is True
    assert record.unsupervised_orphan is False
    assert record.languages_spoken == ("Spanish", "English")
    assert record.payer_name == "Utah Medicaid"


def test_supervised_defaults_to_sign_off_only():
    record = normalize_relationship(supervised(level=None), RESIDENT, PAYER, PROVIDERS)
    assert record.supervision_level is SupervisionLevel.SIGN_OFF_ONLY
    assert record.requires_co_visit is False


def test_direct_record_carries_no_supervision():
    rel = Relationship(
        provider_id="A",
        payer_id="X",
        network_status=NetworkStatus.IN_NETWORK,
        billing_provider_id="A",
        effective_date=date(2024, 1, 1),
        bookable_from_date=date(2024, 2, 1),
    )
    record = normalize_relationship(rel, ATTENDING, PAYER, PROVIDERS)

    assert record.via is Via.DIRECT
    assert record.attending_provider_id is None
    assert record.supervision_level is None
    assert record.requires_co_visit is False
    assert record.languages_spoken == ("English",)
    assert record.bookable_from_date == date(2024, 2, 1)


@pytest.mark.parametrize("billing, providers", [
    (None, PROVIDERS),
    ("missing", PROVIDERS),
    ("B", PROVIDERS),
    ("A", {"A": Provider(id="A", is_active=False), "B": RESIDENT}),
])
def test_unresolvable_attending_is_marked_not_downgraded(billing, providers):
    record = normalize_relationship(supervised(billing=billing), RESIDENT, PAYER, providers)

    assert record.via is Via.SUPERVISED
    assert record.network_status is NetworkStatus.SUPERVISED
    assert record.unsupervised_orphan is True


def test_record_to_dict_uses_plain_values():
    data = normalize_relationship(supervised(), RESIDENT, PAYER, PROVIDERS).to_dict()

    assert data["via"] == "supervised"
    assert data["network_status"] == "supervised"
    assert data["supervision_level"] == "co_visit_required"
    assert data["effective_date"] == "2024-01-01"
    assert data["expiration_date"] is None
    assert data["languages_spoken"] == ["Spanish", "English"]


def test_filter_by_language():
    spanish = normalize_relationship(supervised(), RESIDENT, PAYER, PROVIDERS)
    english = normalize_relationship(
        Relationship(provider_id="A", payer_id="X", network_status=NetworkStatus.IN_NETWORK,
                     effective_date=date(2024, 1, 1)),
        ATTENDING, PAYER, PROVIDERS,
    )

    assert filter_by_language([spanish, english], "spanish") == [spanish]
    assert filter_by_language([spanish, english], "English") == [spanish, english]
    assert filter_by_language([spanish, english], None) == [spanish, english]
    assert filter_by_language([spanish, english], "French") == []
