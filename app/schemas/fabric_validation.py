"""
app/schemas/fabric_validation.py

Response schemas for fabric validation endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from zoning.models import ValidationResult, ValidationSummary
from zoning.storage import FabricLink, StorageMapping, StoragePath, StorageSummary


class WWNResponse(BaseModel):
    """
    One WWN with its login state on a fabric.
    """

    wwn: str
    is_logged_in: bool
    fabric: str


class ValidationResultResponse(BaseModel):
    """
    API response model for one host verdict.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    wwns: list[WWNResponse] = Field(default_factory=list)
    server_type: str
    fab_a_logged_in: int = Field(..., ge=0)
    fab_a_not_logged_in: int = Field(..., ge=0)
    validation_a: Literal["OK", "Error"]
    fab_b_logged_in: int = Field(..., ge=0)
    fab_b_not_logged_in: int = Field(..., ge=0)
    validation_b: Literal["OK", "Error"]
    final_validation: Literal["Good", "FAB-A Is BAD", "FAB-B Is BAD", "Both FABs Are BAD"]

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultResponse":
        return cls(
            host=result.host,
            wwns=[
                WWNResponse(wwn=info.wwn, is_logged_in=info.is_logged_in, fabric=info.fabric)
                for info in result.wwns
            ],
            server_type=result.server_type,
            fab_a_logged_in=result.fab_a_logged_in,
            fab_a_not_logged_in=result.fab_a_not_logged_in,
            validation_a=result.validation_a.value,
            fab_b_logged_in=result.fab_b_logged_in,
            fab_b_not_logged_in=result.fab_b_not_logged_in,
            validation_b=result.validation_b.value,
            final_validation=result.final_validation.value,
        )


class ValidationSummaryResponse(BaseModel):
    """
    API response model for run statistics.
    """

    total: int = Field(..., ge=0)
    good: int = Field(..., ge=0)
    fab_a_bad: int = Field(..., ge=0)
    fab_b_bad: int = Field(..., ge=0)
    both_bad: int = Field(..., ge=0)
    percentage_good: int = Field(..., ge=0, le=100)
    original_entries: int = Field(..., ge=0)
    duplicates_removed: int = Field(..., ge=0)
    unique_entries: int = Field(..., ge=0)

    @classmethod
    def from_summary(cls, summary: ValidationSummary) -> "ValidationSummaryResponse":
        return cls(
            total=summary.total,
            good=summary.good,
            fab_a_bad=summary.fab_a_bad,
            fab_b_bad=summary.fab_b_bad,
            both_bad=summary.both_bad,
            percentage_good=summary.percentage_good,
            original_entries=summary.original_entries,
            duplicates_removed=summary.duplicates_removed,
            unique_entries=summary.unique_entries,
        )


class FabricValidationResponse(BaseModel):
    """
    Results (optionally filtered) plus the summary over every host.
    """

    source_name: str | None = None
    results: list[ValidationResultResponse] = Field(default_factory=list)
    summary: ValidationSummaryResponse


class StoragePathResponse(BaseModel):
    wwn: str
    is_logged_in: bool
    storage: str
    fabric: str
    port: str

    @classmethod
    def from_path(cls, path: StoragePath) -> "StoragePathResponse":
        return cls(
            wwn=path.wwn,
            is_logged_in=path.is_logged_in,
            storage=path.storage,
            fabric=path.fabric,
            port=path.port,
        )


class FabricLinkResponse(BaseModel):
    """
    Logged-in over total paths from a server to one storage array on one fabric.
    """

    storage: str
    fabric: str
    logged_in: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    healthy: bool

    @classmethod
    def from_link(cls, link: FabricLink) -> "FabricLinkResponse":
        return cls(
            storage=link.storage,
            fabric=link.fabric,
            logged_in=link.logged_in,
            total=link.total,
            healthy=link.is_healthy,
        )


class StorageMappingEntryResponse(BaseModel):
    """
    API response model for one server's storage mapping.
    """

    server: str
    health: Literal["OK", "ERROR"]
    path_status: str
    total_ports: int = Field(..., ge=0)
    logged_in_ports: int = Field(..., ge=0)
    not_logged_in_count: int = Field(..., ge=0)
    storages: list[str] = Field(default_factory=list)
    zones: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)
    vendors: list[str] = Field(default_factory=list)
    fabrics: list[str] = Field(default_factory=list)
    paths: list[StoragePathResponse] = Field(default_factory=list)
    connectivity: list[FabricLinkResponse] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, mapping: StorageMapping) -> "StorageMappingEntryResponse":
        return cls(
            server=mapping.server,
            health=mapping.health.value,
            path_status=mapping.path_status,
            total_ports=mapping.total_ports,
            logged_in_ports=mapping.logged_in_ports,
            not_logged_in_count=mapping.not_logged_in_count,
            storages=list(mapping.storages),
            zones=list(mapping.zones),
            ports=list(mapping.ports),
            vendors=list(mapping.vendors),
            fabrics=list(mapping.fabrics),
            paths=[StoragePathResponse.from_path(path) for path in mapping.paths],
            connectivity=[FabricLinkResponse.from_link(link) for link in mapping.connectivity()],
        )


class StorageSummaryResponse(BaseModel):
    total_servers: int = Field(..., ge=0)
    total_storages: int = Field(..., ge=0)
    total_paths: int = Field(..., ge=0)
    healthy_servers: int = Field(..., ge=0)
    unhealthy_servers: int = Field(..., ge=0)

    @classmethod
    def from_summary(cls, summary: StorageSummary) -> "StorageSummaryResponse":
        return cls(
            total_servers=summary.total_servers,
            total_storages=summary.total_storages,
            total_paths=summary.total_paths,
            healthy_servers=summary.healthy_servers,
            unhealthy_servers=summary.unhealthy_servers,
        )


class StorageMappingResponse(BaseModel):
    """
    Storage mappings (optionally filtered) plus the summary over every server.
    """

    source_name: str | None = None
    mappings: list[StorageMappingEntryResponse] = Field(default_factory=list)
    summary: StorageSummaryResponse


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str
    version: str
