"""
Validate a zoning table from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from app.config import get_log_level
from app.services.fabric_ingestion_service import FabricFileFormatError
from app.services.fabric_validation_service import FabricValidationService
from app.services.report_export_service import STORAGE_FORMATS, SUPPORTED_FORMATS, ReportExportService
from app.validators.structure_validator import FabricStructureError
from zoning.filters import ResultFilter


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate FAB-A/FAB-B path redundancy per host.")
    parser.add_argument("path", help="Zoning table (.csv or .xlsx).")
    parser.add_argument(
        "--output",
        dest="output",
        default=None,
        help="Optional report path; the extension (.xlsx, .csv, .json) selects the format.",
    )
    parser.add_argument(
        "--storage-output",
        dest="storage_output",
        default=None,
        help="Optional server to storage mapping report path (.csv or .json).",
    )
    parser.add_argument("--search", default=None, help="Only report hosts containing this text.")
    parser.add_argument(
        "--status",
        default=None,
        help="'all', 'errors' or a final validation label, e.g. 'FAB-A Is BAD'.",
    )
    parser.add_argument("--fab-a", dest="fab_a", default=None, help="'OK' or 'Error'.")
    parser.add_argument("--fab-b", dest="fab_b", default=None, help="'OK' or 'Error'.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        result_filter = ResultFilter.from_params(
            search=args.search,
            status=args.status,
            fab_a=args.fab_a,
            fab_b=args.fab_b,
        )
    except ValueError as exc:
        parser.error(str(exc))

    source = Path(args.path)
    try:
        run = FabricValidationService().run_bytes(source.read_bytes(), filename=source.name)
    except FabricStructureError as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2
    except (FabricFileFormatError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    results = run.filtered(result_filter)
    if args.output:
        output = Path(args.output)
        output_format = output.suffix.lstrip(".").lower()
        if output_format not in SUPPORTED_FORMATS:
            parser.error(f"Unsupported report extension {output.suffix!r}. Valid: {sorted(SUPPORTED_FORMATS)}")
        output.write_bytes(ReportExportService().export(results, output_format=output_format))

    if args.storage_output:
        storage_output = Path(args.storage_output)
        storage_format = storage_output.suffix.lstrip(".").lower()
        if storage_format not in STORAGE_FORMATS:
            parser.error(
                f"Unsupported storage report extension {storage_output.suffix!r}. "
                f"Valid: {sorted(STORAGE_FORMATS)}"
            )
        storage_output.write_bytes(
            ReportExportService().export_storage(run.storage, output_format=storage_format)
        )

    payload = {
        "source": run.source_name,
        "summary": asdict(run.summary),
        "reported_hosts": len(results),
        "storage": asdict(run.storage_summary),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
