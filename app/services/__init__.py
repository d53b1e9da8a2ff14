"""
app/services package marker.
"""

from app.services.fabric_ingestion_service import (
    FabricFileFormatError,
    FabricIngestionService,
    get_fabric_ingestion_service,
)
from app.services.fabric_validation_service import (
    FabricValidationRun,
    FabricValidationService,
    get_fabric_validation_service,
)
from app.services.report_export_service import ReportExportService, get_report_export_service

__all__ = [
    "FabricFileFormatError",
    "FabricIngestionService",
    "get_fabric_ingestion_service",
    "FabricValidationRun",
    "FabricValidationService",
    "get_fabric_validation_service",
    "ReportExportService",
    "get_report_export_service",
]
