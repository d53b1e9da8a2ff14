"""
app/services/report_export_service.py

Downloadable validation reports.

Every report has one row per host with the columns in ``REPORT_COLUMNS``.
The WWN column lists one WWN per line with its fabric and login state.

Formats
-------
csv   UTF-8 text, CRLF line endings
json  list of flat dicts keyed by column name
xlsx  openpyxl workbook, one "Validation Report" sheet, colour-coded:
        header           blue fill, white bold text
        Final Validation green (Good), orange (one fabric bad), red (both bad)
        WWN cell         red when any WWN is not logged in, green otherwise

Storage mapping reports (``export_storage``) have one row per server with
the columns in ``STORAGE_COLUMNS`` and support csv and json.

No filtering happens here; callers pass the rows they want exported.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from app.config import ReportExportSettings, get_report_export_settings
from zoning.models import FinalValidation, ValidationResult
from zoning.storage import StorageMapping

COLUMN_HOST: Final[str] = "Host"
COLUMN_WWNS: Final[str] = "WWNs (Logged In Status)"
COLUMN_FINAL: Final[str] = "Final Validation"

REPORT_COLUMNS: Final[tuple[str, ...]] = (
    COLUMN_HOST,
    COLUMN_WWNS,
    "Server Type",
    "Total WWNs",
    "Fab A : Logged in Yes",
    "Fab A : Logged in No",
    "Validation-A",
    "Fab B : Logged in Yes",
    "Fab B : Logged in No",
    "Validation-B",
    COLUMN_FINAL,
)

SUPPORTED_FORMATS: Final[frozenset[str]] = frozenset({"csv", "json", "xlsx"})

STORAGE_COLUMNS: Final[tuple[str, ...]] = (
    "Server",
    "Path Status",
    "Health",
    "Storages",
    "Zones",
    "Ports",
    "Vendors",
    "Storage WWNs",
    "Fabrics",
)
STORAGE_FORMATS: Final[frozenset[str]] = frozenset({"csv", "json"})
STORAGE_FILENAME_PREFIX: Final[str] = "storage_mapping"
SHEET_TITLE: Final[str] = "Validation Report"

XLSX_MEDIA_TYPE: Final[str] = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MEDIA_TYPES: Final[dict[str, str]] = {
    "csv": "text/csv",
    "json": "application/json",
    "xlsx": XLSX_MEDIA_TYPE,
}

HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")
STATUS_FONT = Font(color="FFFFFF")
STATUS_FILLS: Final[dict[FinalValidation, PatternFill]] = {
    FinalValidation.GOOD: PatternFill(start_color="70AD47", end_color="70AD47", fill_type="solid"),
    FinalValidation.FAB_A_BAD: PatternFill(start_color="E07C24", end_color="E07C24", fill_type="solid"),
    FinalValidation.FAB_B_BAD: PatternFill(start_color="E07C24", end_color="E07C24", fill_type="solid"),
    FinalValidation.BOTH_BAD: PatternFill(start_color="C5504B", end_color="C5504B", fill_type="solid"),
}
WWN_INACTIVE_FILL = PatternFill(start_color="FFE6E6", end_color="FFE6E6", fill_type="solid")
WWN_INACTIVE_FONT = Font(color="C53030")
WWN_ACTIVE_FILL = PatternFill(start_color="E6F4EA", end_color="E6F4EA", fill_type="solid")
WWN_ACTIVE_FONT = Font(color="276749")


@dataclass
class ReportTable:
    """
    Flat report rows plus their source results, in the same order.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    results: list[ValidationResult] = field(default_factory=list)
    fields: tuple[str, ...] = REPORT_COLUMNS


def format_wwns(result: ValidationResult) -> str:
    """Render one line per WWN: ``<wwn> (<fabric>: Logged In)``."""
    return "\n".join(
        f"{info.wwn} ({info.fabric}: {'Logged In' if info.is_logged_in else 'NOT LOGGED IN'})"
        for info in result.wwns
    )


def flatten_result(result: ValidationResult) -> dict[str, Any]:
    values = (
        result.host,
        format_wwns(result),
        result.server_type,
        result.total_wwns,
        result.fab_a_logged_in,
        result.fab_a_not_logged_in,
        result.validation_a.value,
        result.fab_b_logged_in,
        result.fab_b_not_logged_in,
        result.validation_b.value,
        result.final_validation.value,
    )
    return dict(zip(REPORT_COLUMNS, values))


def flatten_storage_mapping(mapping: StorageMapping) -> dict[str, Any]:
    values = (
        mapping.server,
        mapping.path_status,
        mapping.health.value,
        ", ".join(mapping.storages),
        ", ".join(mapping.zones),
        ", ".join(mapping.ports),
        ", ".join(mapping.vendors),
        ", ".join(path.wwn for path in mapping.paths),
        ", ".join(mapping.fabrics),
    )
    return dict(zip(STORAGE_COLUMNS, values))


class ReportExportService:
    """
    Serialises validation results into CSV, JSON or XLSX reports.
    """

    def __init__(self, settings: ReportExportSettings | None = None) -> None:
        self._settings = settings or get_report_export_settings()

    def build_table(self, results: Sequence[ValidationResult]) -> ReportTable:
        return ReportTable(
            rows=[flatten_result(result) for result in results],
            results=list(results),
        )

    def export(self, results: Sequence[ValidationResult], *, output_format: str) -> bytes:
        """
        Return the report for *results* in *output_format*.

        Raises
        ------
        ValueError: When *output_format* is not csv, json or xlsx.
        """

        if output_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unknown output format {output_format!r}. Valid: {sorted(SUPPORTED_FORMATS)}"
            )
        table = self.build_table(results)
        if output_format == "csv":
            return self.to_csv(table)
        if output_format == "json":
            return self.to_json(table)
        return self.to_xlsx(table)

    def export_storage(self, mappings: Sequence[StorageMapping], *, output_format: str) -> bytes:
        """
        Return the storage mapping report in *output_format* (csv or json).
        """

        if output_format not in STORAGE_FORMATS:
            raise ValueError(
                f"Unknown storage report format {output_format!r}. Valid: {sorted(STORAGE_FORMATS)}"
            )
        table = ReportTable(
            rows=[flatten_storage_mapping(mapping) for mapping in mappings],
            fields=STORAGE_COLUMNS,
        )
        if output_format == "csv":
            return self.to_csv(table)
        return self.to_json(table)

    def report_filename(
        self,
        output_format: str,
        *,
        now: datetime | None = None,
        prefix: str | None = None,
    ) -> str:
        timestamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
        return f"{prefix or self._settings.filename_prefix}_{timestamp}.{output_format}"

    # ------------------------------------------------------------------
    # Serialisers
    # ------------------------------------------------------------------

    @staticmethod
    def to_csv(table: ReportTable) -> bytes:
        buf = io.StringIO()
        writer = csv.DictWriter(
            buf,
            fieldnames=list(table.fields),
            extrasaction="ignore",
            restval="",
            lineterminator="\r\n",
        )
        writer.writeheader()
        writer.writerows(table.rows)
        return buf.getvalue().encode("utf-8")

    @staticmethod
    def to_json(table: ReportTable) -> bytes:
        return json.dumps(table.rows, indent=2).encode("utf-8")

    def to_xlsx(self, table: ReportTable) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE

        for col, header in enumerate(table.fields, 1):
            cell = sheet.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = Alignment(horizontal="center", vertical="center")

        wwn_col = table.fields.index(COLUMN_WWNS) + 1
        final_col = table.fields.index(COLUMN_FINAL) + 1
        for row_index, (row, result) in enumerate(zip(table.rows, table.results), 2):
            for col, header in enumerate(table.fields, 1):
                sheet.cell(row=row_index, column=col, value=row[header])

            wwn_cell = sheet.cell(row=row_index, column=wwn_col)
            wwn_cell.alignment = Alignment(wrap_text=True, vertical="top")
            if result.has_inactive_wwn:
                wwn_cell.fill = WWN_INACTIVE_FILL
                wwn_cell.font = WWN_INACTIVE_FONT
            else:
                wwn_cell.fill = WWN_ACTIVE_FILL
                wwn_cell.font = WWN_ACTIVE_FONT

            final_cell = sheet.cell(row=row_index, column=final_col)
            final_cell.fill = STATUS_FILLS[result.final_validation]
            final_cell.font = STATUS_FONT

        for col, width in enumerate(self._column_widths(table), 1):
            sheet.column_dimensions[get_column_letter(col)].width = width

        buf = io.BytesIO()
        workbook.save(buf)
        return buf.getvalue()

    def _column_widths(self, table: ReportTable) -> list[int]:
        settings = self._settings
        widths: list[int] = []
        for header in table.fields:
            if header == COLUMN_WWNS:
                widths.append(settings.wwn_column_width)
                continue
            longest = max([len(header), *(len(str(row[header])) for row in table.rows)])
            widths.append(min(max(longest + 2, settings.min_column_width), settings.max_column_width))
        return widths


# ---------------------------------------------------------------------------
# Singleton factory
# ---------------------------------------------------------------------------


_service: ReportExportService | None = None


def get_report_export_service() -> ReportExportService:
    global _service
    if _service is None:
        _service = ReportExportService()
    return _service
