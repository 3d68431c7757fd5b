"""Batch bookability resolution: read a snapshot, resolve, report, export."""

import argparse
import json
import os
import sys
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from provider_bookability.audit.health import DEFAULT_EXPIRING_WINDOWS, guardrail_report, health_report
from provider_bookability.errors import InvalidRowError, UnknownSourceError
from provider_bookability.models import Scope
from provider_bookability.pipeline import resolve_bookability
from provider_bookability.sources import available_sources, get_source
from provider_bookability.transform.grouping import supervision_summary
from provider_bookability.transform.temporal import ReferenceMode
from provider_bookability.utils.backoff_logger import get_logger, setup_logging
from provider_bookability.utils.dates import parse_date
from provider_bookability.write.parquet_writer import write_records

logger = get_logger(__name__)

EXIT_INVALID_INPUT = 2


def load_config(path: str) -> dict:
    """Load YAML configuration from a file."""
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Provider/payer bookability resolution")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--source", choices=available_sources(), help="Row source type (overrides config)")
    parser.add_argument("--input", help="Snapshot path for the row source (overrides config)")
    parser.add_argument("--provider-id", help="Resolve a single provider")
    parser.add_argument("--payer-id", help="Resolve a single payer")
    parser.add_argument("--service-date", help="Evaluate as of this YYYY-MM-DD instead of today")
    parser.add_argument("--enforce-bookable-from", action="store_true",
                        help="Also require bookable_from_date to have passed")
    parser.add_argument("--output", help="Parquet output path for normalized records")
    parser.add_argument("--s3-bucket", help="S3 bucket name (overrides config)")
    parser.add_argument("--audit", action="store_true", help="Log health and guardrail reports")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config) if os.path.exists(args.config) else {}
    setup_logging(cfg.get("logging", {}).get("level", "INFO"),
                  cfg.get("logging", {}).get("renderer", "json"))

    source_cfg = cfg.get("source", {})
    resolution_cfg = cfg.get("resolution", {})
    output_cfg = cfg.get("output", {})
    s3_cfg = cfg.get("s3", {})

    source_type = args.source or source_cfg.get("type", "json")
    source_path = args.input or source_cfg.get("path")
    service_date = args.service_date or resolution_cfg.get("service_date")
    enforce_bookable_from = args.enforce_bookable_from or bool(resolution_cfg.get("enforce_bookable_from"))
    output_path = args.output or output_cfg.get("path")
    s3_bucket = args.s3_bucket or os.getenv("S3_BUCKET") or s3_cfg.get("bucket")
    s3_prefix = os.getenv("S3_PREFIX") or s3_cfg.get("prefix", "bookability")

    logger.info("starting_bookability_run", args=vars(args), source=source_type)

    if source_type != "memory" and not source_path:
        print("error: no snapshot path; pass --input or set source.path", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        options = {"strict": source_cfg.get("strict", True)}
        if source_type != "memory":
            options["path"] = source_path
        snapshot = get_source(source_type, **options).read_snapshot()
        mode = ReferenceMode.AS_OF_SERVICE_DATE if service_date else ReferenceMode(
            resolution_cfg.get("mode", ReferenceMode.AS_OF_TODAY.value)
        )
        result = resolve_bookability(
            snapshot,
            Scope(provider_id=args.provider_id, payer_id=args.payer_id),
            mode=mode,
            service_date=parse_date(service_date),
            enforce_bookable_from=enforce_bookable_from,
        )
    except (InvalidRowError, UnknownSourceError, ValueError, OSError) as e:
        logger.error("bookability_run_failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if output_path:
        written = write_records(
            result.records,
            output_path,
            batch_size=output_cfg.get("batch_size", 5000),
            s3_bucket=s3_bucket,
            s3_prefix=s3_prefix,
        )
        logger.info("records_exported", paths=written, records=len(result.records))

    if args.audit:
        windows = cfg.get("audit", {}).get("expiring_windows", list(DEFAULT_EXPIRING_WINDOWS))
        health = health_report(snapshot, result.reference_date, windows=windows)
        logger.info("health_report", report=health.to_dict())
        logger.info("guardrail_report", report=guardrail_report(result.anomalies))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    stats = supervision_summary(result.records).stats
    counts = {k: v for k, v in result.anomaly_counts().items() if v}
    print(f"""
Bookability as of {result.reference_date.isoformat()} ({result.mode.value})
==========================================
Records: {stats['total']} (direct {stats['direct']}, supervised {stats['supervised']})
Co-visit required: {stats['co_visit_required']}
Anomalies: {sum(counts.values())}{'' if not counts else ' ' + json.dumps(counts, sort_keys=True)}
Output: {output_path or 'Not written'}
""")
    return 0


if __name__ == "__main__":
    sys.exit(main())
