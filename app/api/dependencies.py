"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Query, UploadFile, status

from app.services.fabric_ingestion_service import SUPPORTED_CONTENT_TYPES, SUPPORTED_EXTENSIONS
from zoning.filters import ResultFilter
from zoning.storage import StorageFilter


def get_fabric_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the upload is a CSV or XLSX zoning table by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    has_supported_extension = filename.endswith(SUPPORTED_EXTENSIONS)
    has_supported_content_type = content_type in SUPPORTED_CONTENT_TYPES

    if not has_supported_extension and not has_supported_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV and XLSX files are allowed.",
        )

    return file


def get_result_filter(
    search: str | None = Query(default=None, description="Case-insensitive host substring"),
    status_filter: str | None = Query(
        default=None,
        alias="status",
        description="'all', 'errors' or a final validation label",
    ),
    fab_a: str | None = Query(default=None, description="'all', 'OK' or 'Error'"),
    fab_b: str | None = Query(default=None, description="'all', 'OK' or 'Error'"),
) -> ResultFilter:
    """
    Build a :class:`ResultFilter` from query parameters.
    """

    try:
        return ResultFilter.from_params(
            search=search,
            status=status_filter,
            fab_a=fab_a,
            fab_b=fab_b,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


def get_storage_filter(
    search: str | None = Query(default=None, description="Server, storage or vendor substring"),
    fabric: str | None = Query(default=None, description="'all' or a fabric name"),
    health: str | None = Query(default=None, description="'all' or 'errors'"),
) -> StorageFilter:
    """
    Build a :class:`StorageFilter` from query parameters.
    """

    try:
        return StorageFilter.from_params(search=search, fabric=fabric, health=health)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
