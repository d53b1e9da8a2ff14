"""
app/domain package marker.
"""

from app.domain.fabric_ingestion import FabricTable, StructureIssue

__all__ = [
    "FabricTable",
    "StructureIssue",
]
