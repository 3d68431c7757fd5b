"""Bookability health and guardrail reports for the admin audit dashboards."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models import Anomaly, AnomalyKind, NetworkStatus, Provider, Snapshot
from ..transform.temporal import is_schedulable
from ..utils.backoff_logger import get_logger
from ..utils.dates import to_iso

logger = get_logger(__name__)

LIVE_PAYER_STATUS_CODES = ("approved", "active")
DEFAULT_EXPIRING_WINDOWS = (30, 60, 90)


@dataclass
class HealthMetric:
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
    payer_id: Optional[str] = None
    payer_name: Optional[str] = None
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    days_until_expiration: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "payer_id": self.payer_id,
            "payer_name": self.payer_name,
            "effective_date": to_iso(self.effective_date),
            "expiration_date": to_iso(self.expiration_date),
            "days_until_expiration": self.days_until_expiration,
        }


@dataclass
class HealthReport:
    reference_date: date
    providers_zero_payers: List[HealthMetric] = field(default_factory=list)
    payers_zero_providers: List[HealthMetric] = field(default_factory=list)
    contracts_expiring: Dict[int, List[HealthMetric]] = field(default_factory=dict)
    providers_no_contracts: List[HealthMetric] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference_date": self.reference_date.isoformat(),
            "providers_zero_payers": [m.to_dict() for m in self.providers_zero_payers],
            "payers_zero_providers": [m.to_dict() for m in self.payers_zero_providers],
            "contracts_expiring": {
                f"days_{days}": [m.to_dict() for m in metrics]
                for days, metrics in sorted(self.contracts_expiring.items())
            },
            "providers_no_contracts": [m.to_dict() for m in self.providers_no_contracts],
        }


def _taking_patients(provider: Provider) -> bool:
    return provider.is_active and provider.is_bookable and provider.accepts_new_patients


def health_report(snapshot: Snapshot, reference_date: date,
                  windows: Sequence[int] = DEFAULT_EXPIRING_WINDOWS) -> HealthReport:
    """Summarize coverage gaps on ``reference_date``.

    Expiring windows are cumulative: a contract expiring in 20 days appears
    under 30, 60 and 90.

    Args:
        snapshot: rows read at one point in time
        reference_date: date to evaluate against
        windows: day counts for the expiring-contract buckets

    Returns:
        HealthReport
    """
    providers = snapshot.providers_by_id()
    payers = snapshot.payers_by_id()
    schedulable = [rel for rel in snapshot.relationships if is_schedulable(rel, reference_date)]

    covered_providers = {rel.provider_id for rel in schedulable}
    covered_payers = {rel.payer_id for rel in schedulable}
    contracted_providers = {
        rel.provider_id for rel in schedulable if rel.network_status is NetworkStatus.IN_NETWORK
    }

    report = HealthReport(reference_date=reference_date)
    taking = sorted(
        (p for p in snapshot.providers if _taking_patients(p)),
        key=lambda p: (p.display_name, p.id),
    )
    report.providers_zero_payers = [
        HealthMetric(provider_id=p.id, provider_name=p.display_name)
        for p in taking if p.id not in covered_providers
    ]
    report.providers_no_contracts = [
        HealthMetric(provider_id=p.id, provider_name=p.display_name)
        for p in taking if p.id not in contracted_providers
    ]
    report.payers_zero_providers = [
        HealthMetric(payer_id=p.id, payer_name=p.name)
        for p in sorted(snapshot.payers, key=lambda p: (p.name, p.id))
        if (p.status_code or "").lower() in LIVE_PAYER_STATUS_CODES and p.id not in covered_payers
    ]

    expiring = sorted(
        (
            rel for rel in snapshot.relationships
            if rel.network_status is NetworkStatus.IN_NETWORK
            and rel.effective_date is not None
            and rel.effective_date <= reference_date
            and rel.expiration_date is not None
            and rel.expiration_date >= reference_date
        ),
        key=lambda rel: (rel.expiration_date, rel.provider_id, rel.payer_id),
    )
    for days in windows:
        horizon = reference_date + timedelta(days=days)
        bucket = []
        for rel in expiring:
            if rel.expiration_date > horizon:
                break
            provider = providers.get(rel.provider_id)
            payer = payers.get(rel.payer_id)
            bucket.append(HealthMetric(
                provider_id=rel.provider_id,
                provider_name=provider.display_name if provider else None,
                payer_id=rel.payer_id,
                payer_name=payer.name if payer else None,
                effective_date=rel.effective_date,
                expiration_date=rel.expiration_date,
                days_until_expiration=(rel.expiration_date - reference_date).days,
            ))
        report.contracts_expiring[days] = bucket

    logger.info(
        "health_report_built",
        reference_date=reference_date.isoformat(),
        providers_zero_payers=len(report.providers_zero_payers),
        payers_zero_providers=len(report.payers_zero_providers),
        providers_no_contracts=len(report.providers_no_contracts),
        expiring={str(days): len(items) for days, items in report.contracts_expiring.items()},
    )
    return report


def guardrail_report(anomalies: Iterable[Anomaly]) -> Dict[str, Any]:
    """Group anomalies by kind for the guardrail audit view."""
    by_kind: Dict[str, List[Dict[str, Any]]] = {kind.value: [] for kind in AnomalyKind}
    for anomaly in anomalies:
        by_kind[anomaly.kind.value].append(anomaly.to_dict())
    return {
        "counts": {kind: len(items) for kind, items in by_kind.items()},
        "anomalies": by_kind,
    }
