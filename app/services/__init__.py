"""
app/services package marker.
"""

from app.services.impact_engine import (
    ImpactEngine,
    ImpactEngineError,
    ImpactReport,
    get_impact_engine,
)

__all__ = [
    "ImpactEngine",
    "ImpactEngineError",
    "ImpactReport",
    "get_impact_engine",
]
