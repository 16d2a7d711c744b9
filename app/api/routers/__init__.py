"""
app/api/routers package marker.
"""

from app.api.routers.impact_router import router as impact_router

__all__ = [
    "impact_router",
]
