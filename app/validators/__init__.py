"""
app/validators package marker.
"""

from app.validators.structure_validator import FabricStructureError, FabricStructureValidator

__all__ = [
    "FabricStructureError",
    "FabricStructureValidator",
]
