"""
app/api/routers/fabric_validation.py

Fabric validation HTTP endpoints.

POST /fabric/validate
    multipart ``file`` (.csv or .xlsx) -> FabricValidationResponse
POST /fabric/report
    multipart ``file`` -> downloadable report (xlsx | csv) or JSON rows
POST /fabric/storage
    multipart ``file`` -> server to storage mapping (json) or CSV download;
    filters ``search``, ``fabric`` and ``health``

The validate and report endpoints accept the result filters ``search``,
``status``, ``fab_a`` and ``fab_b``. Filters narrow the returned rows only;
the summaries always cover every host (or server) in the upload.

All parsing and validation lives in the services; the router only handles
HTTP plumbing (error mapping, content type, headers).
"""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse, StreamingResponse

from app.api.dependencies import get_fabric_upload, get_result_filter, get_storage_filter
from app.schemas.fabric_validation import (
    FabricValidationResponse,
    StorageMappingEntryResponse,
    StorageMappingResponse,
    StorageSummaryResponse,
    ValidationResultResponse,
    ValidationSummaryResponse,
)
from app.services.fabric_ingestion_service import FabricFileFormatError
from app.services.fabric_validation_service import (
    FabricValidationRun,
    FabricValidationService,
    get_fabric_validation_service,
)
from app.services.report_export_service import (
    MEDIA_TYPES,
    STORAGE_FILENAME_PREFIX,
    STORAGE_FORMATS,
    ReportExportService,
    get_report_export_service,
)
from app.validators.structure_validator import FabricStructureError
from zoning.filters import ResultFilter
from zoning.storage import StorageFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fabric", tags=["fabric-validation"])

_VALID_REPORT_FORMATS = frozenset({"xlsx", "csv", "json"})


def _run_validation(upload: UploadFile, service: FabricValidationService) -> FabricValidationRun:
    try:
        return service.run_upload(upload)
    except FabricStructureError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except FabricFileFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        upload.file.close()


@router.post("/validate", response_model=FabricValidationResponse)
def validate_fabric(
    file: UploadFile = Depends(get_fabric_upload),
    result_filter: ResultFilter = Depends(get_result_filter),
    service: FabricValidationService = Depends(get_fabric_validation_service),
) -> FabricValidationResponse:
    """
    Validate FAB-A/FAB-B path redundancy for every host in one zoning table.
    """

    run = _run_validation(file, service)
    results = run.filtered(result_filter)
    return FabricValidationResponse(
        source_name=run.source_name,
        results=[ValidationResultResponse.from_result(result) for result in results],
        summary=ValidationSummaryResponse.from_summary(run.summary),
    )


@router.post(
    "/report",
    response_model=None,
    summary="Download a colour-coded validation report",
)
def download_report(
    output_format: str = Query(
        default="xlsx",
        alias="format",
        description='Report format: "xlsx", "csv" (file download) or "json".',
    ),
    file: UploadFile = Depends(get_fabric_upload),
    result_filter: ResultFilter = Depends(get_result_filter),
    service: FabricValidationService = Depends(get_fabric_validation_service),
    exporter: ReportExportService = Depends(get_report_export_service),
) -> StreamingResponse | JSONResponse:
    """
    Validate the upload and return the per-host report.
    """

    if output_format not in _VALID_REPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_REPORT_FORMATS)}.",
        )

    run = _run_validation(file, service)
    results = run.filtered(result_filter)

    logger.info(
        "Fabric report source=%r format=%r rows=%d of %d",
        run.source_name,
        output_format,
        len(results),
        len(run.results),
    )

    if output_format == "json":
        table = exporter.build_table(results)
        return JSONResponse(
            content={
                "rows": len(table.rows),
                "fields": list(table.fields),
                "data": table.rows,
            }
        )

    content = exporter.export(results, output_format=output_format)
    filename = exporter.report_filename(output_format)
    return StreamingResponse(
        content=io.BytesIO(content),
        media_type=MEDIA_TYPES[output_format],
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Row-Count": str(len(results)),
        },
    )


@router.post(
    "/storage",
    response_model=None,
    summary="Server to storage array mapping with path health",
)
def storage_mapping(
    output_format: str = Query(
        default="json",
        alias="format",
        description='Response format: "json" or "csv" (file download).',
    ),
    file: UploadFile = Depends(get_fabric_upload),
    storage_filter: StorageFilter = Depends(get_storage_filter),
    service: FabricValidationService = Depends(get_fabric_validation_service),
    exporter: ReportExportService = Depends(get_report_export_service),
) -> StorageMappingResponse | StreamingResponse:
    """
    Map every server to the storage arrays it is zoned to.
    """

    if output_format not in STORAGE_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(STORAGE_FORMATS)}.",
        )

    run = _run_validation(file, service)
    mappings = run.filtered_storage(storage_filter)

    logger.info(
        "Storage mapping source=%r format=%r servers=%d of %d",
        run.source_name,
        output_format,
        len(mappings),
        len(run.storage),
    )

    if output_format == "json":
        return StorageMappingResponse(
            source_name=run.source_name,
            mappings=[StorageMappingEntryResponse.from_mapping(mapping) for mapping in mappings],
            summary=StorageSummaryResponse.from_summary(run.storage_summary),
        )

    content = exporter.export_storage(mappings, output_format=output_format)
    filename = exporter.report_filename(output_format, prefix=STORAGE_FILENAME_PREFIX)
    return StreamingResponse(
        content=io.BytesIO(content),
        media_type=MEDIA_TYPES[output_format],
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Row-Count": str(len(mappings)),
        },
    )
