"""Aggregations over normalized bookability records."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..models import BookableRecord, Via

UNKNOWN_ATTENDING = "unknown"


def group_by_attending(records: Iterable[BookableRecord],
                       payer_id: Optional[str] = None) -> Dict[str, List[BookableRecord]]:
    """Group supervised records by attending provider.

    Records without a resolvable attending land under ``"unknown"``.

    Args:
        records: normalized records
        payer_id: restrict to one payer when given

    Returns:
        Mapping of attending id to the trainee records it covers
    """
    groups: Dict[str, List[BookableRecord]] = {}
    for record in records:
        if record.via is not Via.SUPERVISED:
            continue
        if payer_id is not None and record.payer_id != payer_id:
            continue
        key = record.attending_provider_id
        if not key or record.unsupervised_orphan:
            key = UNKNOWN_ATTENDING
        groups.setdefault(key, []).append(record)
    return groups


def trainees_for(records: Iterable[BookableRecord], attending_id: str,
                 payer_id: Optional[str] = None) -> List[str]:
    """Provider ids supervised by ``attending_id``, optionally for one payer."""
    seen: List[str] = []
    for record in group_by_attending(records, payer_id).get(attending_id, []):
        if record.provider_id not in seen:
            seen.append(record.provider_id)
    return seen


@dataclass
class SupervisionSummary:
    direct: List[BookableRecord] = field(default_factory=list)
    supervised: List[BookableRecord] = field(default_factory=list)
    groups: Dict[str, List[BookableRecord]] = field(default_factory=dict)

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "total": len(self.direct) + len(self.supervised),
            "direct": len(self.direct),
            "supervised": len(self.supervised),
            "co_visit_required": sum(1 for r in self.supervised if r.requires_co_visit),
            "unsupervised_orphans": sum(1 for r in self.supervised if r.unsupervised_orphan),
        }


def supervision_summary(records: Iterable[BookableRecord]) -> SupervisionSummary:
    records = list(records)
    return SupervisionSummary(
        direct=[r for r in records if r.via is Via.DIRECT],
        supervised=[r for r in records if r.via is Via.SUPERVISED],
        groups=group_by_attending(records),
    )
