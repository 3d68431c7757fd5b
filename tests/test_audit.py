"""Tests for the coverage, health and guardrail reports."""

from datetime import date

import pytest

from provider_bookability.audit.coverage import (
    UNKNOWN_PAYER,
    coverage_for_payer,
    coverage_for_provider,
)
from provider_bookability.audit.health import guardrail_report, health_report
from provider_bookability.models import Anomaly, AnomalyKind, NetworkStatus
from provider_bookability.sources import get_source

REF = date(2025, 6, 1)


@pytest.fixture
def snapshot():
    return get_source(
        "memory",
        providers=[
            {"id": "A", "first_name": "Dana", "last_name": "Whitfield"},
            {"id": "B", "first_name": "Luis", "last_name": "Moreno"},
            {"id": "C", "first_name": "Priya", "last_name": "Natarajan"},
            {"id": "D", "first_name": "Inactive", "last_name": "Doc", "is_active": False},
        ],
        payers=[
            {"id": "X", "name": "Utah Medicaid", "status_code": "approved"},
            {"id": "Y", "name": "SelectHealth", "status_code": "active"},
            {"id": "Z", "name": "Aetna", "status_code": "approved"},
            {"id": "W", "name": "Pending Plan", "status_code": "in_progress"},
        ],
        relationships=[
            {"id": "r1", "provider_id": "A", "payer_id": "X", "network_status": "in_network",
             "effective_date": "2024-01-01", "expiration_date": "2025-06-20"},
            {"id": "r2", "provider_id": "A", "payer_id": "Y", "network_status": "in_network",
             "effective_date": "2024-01-01", "expiration_date": "2025-08-15"},
            {"id": "r3", "provider_id": "B", "payer_id": "X", "network_status": "supervised",
             "billing_provider_id": "A", "effective_date": "2024-01-01"},
            {"id": "r4", "provider_id": "A", "payer_id": "ghost", "network_status": "in_network",
             "effective_date": "2024-01-01"},
            {"id": "r5", "provider_id": "C", "payer_id": "Y", "network_status": "in_network",
             "effective_date": "2024-01-01", "bookable_from_date": "2025-07-01"},
        ],
    ).read_snapshot()


def test_coverage_for_provider(snapshot):
    items = coverage_for_provider(snapshot, "A", REF)

    assert [(i.id, i.name) for i in items] == [
        ("X", "Utah Medicaid"),
        ("Y", "SelectHealth"),
        ("ghost", UNKNOWN_PAYER),
    ]
    assert all(i.supervising_attendings == [] for i in items)
    assert items[0].to_dict()["expiration_date"] == "2025-06-20"


def test_coverage_for_payer_lists_attendings(snapshot):
    items = coverage_for_payer(snapshot, "X", REF)

    assert [(i.id, i.network_status) for i in items] == [
        ("A", NetworkStatus.IN_NETWORK),
        ("B", NetworkStatus.SUPERVISED),
    ]
    assert items[1].name == "Luis Moreno"
    assert items[1].supervising_attendings == ["Dana Whitfield"]


def test_coverage_honours_bookable_from_by_default(snapshot):
    assert [i.id for i in coverage_for_payer(snapshot, "Y", REF)] == ["A"]
    assert [i.id for i in coverage_for_payer(snapshot, "Y", REF, enforce_bookable_from=False)] == ["A", "C"]


def test_health_report(snapshot):
    report = health_report(snapshot, REF)

    assert [m.provider_id for m in report.providers_zero_payers] == ["C"]
    assert [m.provider_id for m in report.providers_no_contracts] == ["B", "C"]
    assert [m.payer_id for m in report.payers_zero_providers] == ["Z"]

    assert [m.payer_id for m in report.contracts_expiring[30]] == ["X"]
    assert report.contracts_expiring[30][0].days_until_expiration == 19
    assert [m.payer_id for m in report.contracts_expiring[60]] == ["X"]
    assert [m.payer_id for m in report.contracts_expiring[90]] == ["X", "Y"]

    data = report.to_dict()
    assert set(data["contracts_expiring"]) == {"days_30", "days_60", "days_90"}
    assert data["contracts_expiring"]["days_90"][1]["payer_name"] == "SelectHealth"


def test_health_report_custom_windows(snapshot):
    report = health_report(snapshot, REF, windows=[7])
    assert report.contracts_expiring == {7: []}


def test_guardrail_report():
    anomalies = [
        Anomaly(kind=AnomalyKind.DUPLICATE, provider_id="A", payer_id="X", relationship_ids=("r1", "r2")),
        Anomaly(kind=AnomalyKind.ORPHANED_PAYER, provider_id="A", payer_id="ghost"),
    ]
    report = guardrail_report(anomalies)

    assert report["counts"]["duplicate"] == 1
    assert report["counts"]["orphaned_payer"] == 1
    assert report["counts"]["unsupervised_orphan"] == 0
    assert report["anomalies"]["duplicate"][0]["relationship_ids"] == ["r1", "r2"]


def test_expiring_contracts_must_be_in_force():
    rows = {
        "providers": [{"id": "A", "first_name": "Dana", "last_name": "Whitfield"}],
        "payers": [{"id": "X", "name": "Utah Medicaid", "status_code": "approved"}],
        "relationships": [
            {"id": "current", "provider_id": "A", "payer_id": "X", "network_status": "in_network",
             "effective_date": "2024-01-01", "expiration_date": "2025-06-10"},
            {"id": "not-yet", "provider_id": "A", "payer_id": "X", "network_status": "in_network",
             "effective_date": "2025-06-05", "expiration_date": "2025-06-20"},
            {"id": "undated", "provider_id": "A", "payer_id": "X", "network_status": "in_network",
             "expiration_date": "2025-06-15"},
        ],
    }
    report = health_report(get_source("memory", **rows).read_snapshot(), REF, windows=[30])

    assert [m.expiration_date for m in report.contracts_expiring[30]] == [date(2025, 6, 10)]
