"""
app/schemas package marker.
"""

from app.schemas.fabric_validation import (
    FabricLinkResponse,
    FabricValidationResponse,
    HealthResponse,
    StorageMappingEntryResponse,
    StorageMappingResponse,
    StoragePathResponse,
    StorageSummaryResponse,
    ValidationResultResponse,
    ValidationSummaryResponse,
    WWNResponse,
)

__all__ = [
    "FabricLinkResponse",
    "FabricValidationResponse",
    "HealthResponse",
    "StorageMappingEntryResponse",
    "StorageMappingResponse",
    "StoragePathResponse",
    "StorageSummaryResponse",
    "ValidationResultResponse",
    "ValidationSummaryResponse",
    "WWNResponse",
]
