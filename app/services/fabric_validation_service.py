"""
app/services/fabric_validation_service.py

Orchestrates one validation run: ingest -> structural pre-check ->
FabricValidator -> results and summary, plus the storage mapping over the
same rows.

A fresh :class:`FabricValidator` is built for every run, so concurrent
requests never share aggregation state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache

from fastapi import UploadFile

from app.domain.fabric_ingestion import FabricTable
from app.services.fabric_ingestion_service import (
    FabricIngestionService,
    get_fabric_ingestion_service,
)
from zoning.filters import ResultFilter
from zoning.models import FabricRecord, ValidationResult, ValidationSummary
from zoning.storage import (
    StorageFilter,
    StorageMapping,
    StorageSummary,
    map_storage,
    summarize_storage,
)
from zoning.validator import FabricValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FabricValidationRun:
    """
    Output of one run. ``results`` covers every host; use
    :meth:`filtered` for a display subset.
    """

    results: list[ValidationResult]
    summary: ValidationSummary
    source_name: str | None = None
    headers: tuple[str, ...] = field(default_factory=tuple)
    storage: tuple[StorageMapping, ...] = field(default_factory=tuple)

    @property
    def storage_summary(self) -> StorageSummary:
        return summarize_storage(self.storage)

    def filtered(self, result_filter: ResultFilter | None = None) -> list[ValidationResult]:
        if result_filter is None or result_filter.is_empty:
            return list(self.results)
        return result_filter.apply(self.results)

    def filtered_storage(self, storage_filter: StorageFilter | None = None) -> list[StorageMapping]:
        if storage_filter is None:
            return list(self.storage)
        return storage_filter.apply(self.storage)


class FabricValidationService:
    """
    Thin coordinator between ingestion and the validation engine.
    """

    def __init__(self, *, ingestion_service: FabricIngestionService | None = None) -> None:
        self._ingestion_service = ingestion_service or get_fabric_ingestion_service()

    def run_upload(self, upload_file: UploadFile) -> FabricValidationRun:
        table = self._ingestion_service.read_upload(upload_file)
        return self._run_table(table, source_name=upload_file.filename)

    def run_bytes(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None = None,
    ) -> FabricValidationRun:
        table = self._ingestion_service.read_bytes(data, filename=filename, content_type=content_type)
        return self._run_table(table, source_name=filename)

    def run_records(
        self,
        records: list[FabricRecord],
        *,
        source_name: str | None = None,
    ) -> FabricValidationRun:
        """
        Validate already-parsed records; the structural pre-check is the
        caller's responsibility.
        """

        records = list(records)
        validator = FabricValidator(records)
        results = validator.validate()
        summary = validator.summary(results)
        logger.info(
            "Fabric validation completed source=%r hosts=%d good=%d fab_a_bad=%d "
            "fab_b_bad=%d both_bad=%d duplicates_removed=%d",
            source_name,
            summary.total,
            summary.good,
            summary.fab_a_bad,
            summary.fab_b_bad,
            summary.both_bad,
            summary.duplicates_removed,
        )
        return FabricValidationRun(
            results=results,
            summary=summary,
            source_name=source_name,
            storage=tuple(map_storage(records)),
        )

    def _run_table(self, table: FabricTable, *, source_name: str | None) -> FabricValidationRun:
        run = self.run_records(table.records, source_name=source_name)
        return FabricValidationRun(
            results=run.results,
            summary=run.summary,
            source_name=source_name,
            headers=table.headers,
            storage=run.storage,
        )


@lru_cache(maxsize=1)
def get_fabric_validation_service() -> FabricValidationService:
    return FabricValidationService()
