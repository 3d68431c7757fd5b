from provider_bookability.models import BookableRecord, NetworkStatus, SupervisionLevel, Via
from provider_bookability.transform.grouping import (
    UNKNOWN_ATTENDING,
    group_by_attending,
    supervision_summary,
    trainees_for,
)


def direct(provider, payer):
    return BookableRecord(provider_id=provider, payer_id=payer, via=Via.DIRECT,
                          network_status=NetworkStatus.IN_NETWORK)


def supervised(provider, payer, attending, level=SupervisionLevel.SIGN_OFF_ONLY, orphan=False):
    return BookableRecord(
        provider_id=provider,
        payer_id=payer,
        via=Via.SUPERVISED,
        network_status=NetworkStatus.SUPERVISED,
        attending_provider_id=attending,
        rendering_provider_id=provider,
        supervision_level=level,
        requires_co_visit=level is SupervisionLevel.CO_VISIT_REQUIRED,
        unsupervised_orphan=orphan,
    )


RECORDS = [
    direct("A", "X"),
    supervised("B", "X", "A", SupervisionLevel.CO_VISIT_REQUIRED),
    supervised("C", "X", "A"),
    supervised("C", "Y", "A"),
    supervised("D", "Y", "E"),
    supervised("F", "X", None, orphan=True),
]


def test_group_by_attending():
    groups = group_by_attending(RECORDS)

    assert [r.provider_id for r in groups["A"]] == ["B", "C", "C"]
    assert [r.provider_id for r in groups["E"]] == ["D"]
    assert [r.provider_id for r in groups[UNKNOWN_ATTENDING]] == ["F"]


def test_group_by_attending_for_one_payer():
    groups = group_by_attending(RECORDS, payer_id="Y")
    assert set(groups) == {"A", "E"}
    assert [r.provider_id for r in groups["A"]] == ["C"]


def test_trainees_for():
    assert trainees_for(RECORDS, "A") == ["B", "C"]
    assert trainees_for(RECORDS, "A", payer_id="X") == ["B", "C"]
    assert trainees_for(RECORDS, "E", payer_id="X") == []


def test_supervision_summary_stats():
    summary = supervision_summary(RECORDS)

    assert summary.stats == {
        "total": 6,
        "direct": 1,
        "supervised": 5,
        "co_visit_required": 1,
        "unsupervised_orphans": 1,
    }
    assert summary.direct == [RECORDS[0]]
    assert set(summary.groups) == {"A", "E", UNKNOWN_ATTENDING}
