"""
app/api/routers package marker.
"""

from app.api.routers.fabric_validation import router as fabric_validation_router

__all__ = [
    "fabric_validation_router",
]
