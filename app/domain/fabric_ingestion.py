"""
app/domain/fabric_ingestion.py

Domain models used by the zoning table ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from zoning.models import FabricRecord

COLUMN_FABRIC: Final[str] = "Fabric"
COLUMN_ALIAS: Final[str] = "Alias"
COLUMN_MEMBER_WWN: Final[str] = "Member WWN / D,P"
COLUMN_LOGGED_IN: Final[str] = "Logged In"

REQUIRED_COLUMNS: Final[tuple[str, ...]] = (COLUMN_FABRIC, COLUMN_ALIAS, COLUMN_LOGGED_IN)

# Header vocabulary of the exported zoning table -> FabricRecord field.
COLUMN_TO_FIELD: Final[dict[str, str]] = {
    COLUMN_FABRIC: "fabric",
    "Zone Configuration": "zone_configuration",
    "Zone Configuration Status": "zone_configuration_status",
    "Zone": "zone",
    "Zone Type": "zone_type",
    COLUMN_ALIAS: "alias",
    "Alias Type": "alias_type",
    COLUMN_MEMBER_WWN: "member_wwn",
    "Peer Zone Member Type": "peer_zone_member_type",
    "Port Role": "port_role",
    COLUMN_LOGGED_IN: "logged_in",
    "Vendor": "vendor",
    "Slot/Port #": "slot_port",
}


@dataclass(frozen=True)
class StructureIssue:
    """
    One structural problem found in an uploaded table.
    """

    code: str
    message: str
    column: str | None = None
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class FabricTable:
    """
    Parsed upload: the header row and the records built from data rows.
    """

    headers: tuple[str, ...]
    records: list[FabricRecord] = field(default_factory=list)
    rows_read: int = 0
    blank_rows_skipped: int = 0
