"""
app/services/fabric_ingestion_service.py

Service layer for reading zoning table uploads.

Supported formats
-----------------
.csv   read with the csv module (UTF-8, BOM tolerated)
.xlsx  read with pandas/openpyxl, first worksheet, every cell as text

Without a known extension the upload MIME type picks the reader.

The first row is the header. Cells are stripped and missing cells become
empty strings. Rows lacking a Fabric or an Alias value are treated as
blank spreadsheet rows and skipped. No validation of the fabric topology
happens here; see :mod:`zoning.validator`.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from functools import lru_cache
from typing import Any, Sequence

import pandas as pd
from fastapi import UploadFile
from openpyxl.utils.exceptions import InvalidFileException

from app.config import get_fabric_ingestion_settings
from app.domain.fabric_ingestion import COLUMN_TO_FIELD, FabricTable
from app.validators.structure_validator import FabricStructureError, FabricStructureValidator
from zoning.models import FabricRecord

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx",)
LEGACY_EXCEL_EXTENSIONS = (".xls",)
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS + EXCEL_EXTENSIONS

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_CONTENT_TYPES = frozenset({"text/csv", "application/csv"})
EXCEL_CONTENT_TYPES = frozenset({XLSX_CONTENT_TYPE})
SUPPORTED_CONTENT_TYPES = CSV_CONTENT_TYPES | EXCEL_CONTENT_TYPES


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FabricFileFormatError(ValueError):
    """
    Raised when an upload cannot be read as a zoning table.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class FabricIngestionService:
    """
    Parses uploads into :class:`FabricRecord` rows and runs the structural
    pre-check.
    """

    def __init__(
        self,
        *,
        max_upload_bytes: int,
        log_structure_errors: bool,
        structure_validator: FabricStructureValidator | None = None,
    ) -> None:
        self._max_upload_bytes = max(1, max_upload_bytes)
        self._log_structure_errors = log_structure_errors
        self._structure_validator = structure_validator or FabricStructureValidator()

    def read_upload(self, upload_file: UploadFile) -> FabricTable:
        """
        Read a FastAPI/Starlette upload and return the checked table.
        """

        raw_file = upload_file.file
        raw_file.seek(0)
        data = raw_file.read(self._max_upload_bytes + 1)
        return self.read_bytes(
            data,
            filename=upload_file.filename or "",
            content_type=upload_file.content_type,
        )

    def read_bytes(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None = None,
    ) -> FabricTable:
        """
        Parse *data* according to the extension of *filename*, or to
        *content_type* when the name carries no known extension.

        Raises
        ------
        FabricFileFormatError: unreadable file, unsupported format, too
            large, or fewer than a header plus one data row.
        FabricStructureError: required columns missing or unknown fabric
            identifiers present.
        """

        if len(data) > self._max_upload_bytes:
            raise FabricFileFormatError(
                f"File exceeds the maximum upload size of {self._max_upload_bytes} bytes."
            )

        grid = self._read_grid(data, filename=filename, content_type=content_type)
        table = self._build_table(grid)
        try:
            self._structure_validator.validate(headers=table.headers, records=table.records)
        except FabricStructureError as exc:
            if self._log_structure_errors:
                for issue in exc.issues:
                    logger.warning(
                        "Zoning table structure error file=%r code=%s message=%s",
                        filename,
                        issue.code,
                        issue.message,
                    )
            raise

        logger.info(
            "Parsed zoning table file=%r rows_read=%d records=%d blank_rows_skipped=%d",
            filename,
            table.rows_read,
            len(table.records),
            table.blank_rows_skipped,
        )
        return table

    # ------------------------------------------------------------------
    # Format readers
    # ------------------------------------------------------------------

    def _read_grid(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None = None,
    ) -> list[list[str]]:
        name = filename.strip().lower()
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        if name.endswith(CSV_EXTENSIONS):
            return self._read_csv(data)
        if name.endswith(EXCEL_EXTENSIONS):
            return self._read_xlsx(data)
        if name.endswith(LEGACY_EXCEL_EXTENSIONS):
            raise FabricFileFormatError(
                "Legacy .xls workbooks are not supported. Save the file as .xlsx or .csv."
            )
        if media_type in CSV_CONTENT_TYPES:
            return self._read_csv(data)
        if media_type in EXCEL_CONTENT_TYPES:
            return self._read_xlsx(data)
        raise FabricFileFormatError(
            f"Unsupported file type. Allowed extensions: {', '.join(SUPPORTED_EXTENSIONS)}."
        )

    @staticmethod
    def _read_csv(data: bytes) -> list[list[str]]:
        try:
            text = data.decode("utf-8-sig")
            reader = csv.reader(io.StringIO(text, newline=""))
            return [[_clean_cell(cell) for cell in row] for row in reader]
        except UnicodeDecodeError as exc:
            raise FabricFileFormatError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise FabricFileFormatError(f"Invalid CSV format: {exc}") from exc

    @staticmethod
    def _read_xlsx(data: bytes) -> list[list[str]]:
        try:
            frame = pd.read_excel(
                io.BytesIO(data),
                sheet_name=0,
                header=None,
                dtype=str,
                engine="openpyxl",
            )
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
            raise FabricFileFormatError(f"Failed to parse Excel file: {exc}") from exc

        frame = frame.fillna("")
        return [[_clean_cell(cell) for cell in row] for row in frame.itertuples(index=False, name=None)]

    # ------------------------------------------------------------------
    # Table assembly
    # ------------------------------------------------------------------

    def _build_table(self, grid: Sequence[Sequence[str]]) -> FabricTable:
        rows = [row for row in grid if any(cell for cell in row)]
        if len(rows) < 2:
            raise FabricFileFormatError("File must contain headers and at least one data row")

        headers = tuple(rows[0])
        field_by_index = {
            index: COLUMN_TO_FIELD[header]
            for index, header in enumerate(headers)
            if header in COLUMN_TO_FIELD
        }

        records: list[FabricRecord] = []
        skipped = 0
        for row in rows[1:]:
            values = {
                field_name: row[index] if index < len(row) else ""
                for index, field_name in field_by_index.items()
            }
            if not values.get("fabric") or not values.get("alias"):
                skipped += 1
                continue
            records.append(FabricRecord(**values))

        return FabricTable(
            headers=headers,
            records=records,
            rows_read=len(rows) - 1,
            blank_rows_skipped=skipped,
        )


def _clean_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_fabric_ingestion_service() -> FabricIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_fabric_ingestion_settings()
    return FabricIngestionService(
        max_upload_bytes=settings.max_upload_bytes,
        log_structure_errors=settings.log_structure_errors,
    )
