"""Admin audit reports built on the resolution stages."""

from .coverage import CoverageItem, coverage_for_payer, coverage_for_provider
from .health import HealthMetric, HealthReport, guardrail_report, health_report

__all__ = [
    "CoverageItem",
    "HealthMetric",
    "HealthReport",
    "coverage_for_payer",
    "coverage_for_provider",
    "guardrail_report",
    "health_report",
]
