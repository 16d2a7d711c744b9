"""
app/schemas package marker.
"""

from app.schemas.impact import (
    CostEffectivenessResponse,
    DataQualityResponse,
    FidelityDashboardResponse,
    HealthResponse,
    ImpactReportResponse,
    LearningGainsResponse,
    PerformanceNodeResponse,
)

__all__ = [
    "CostEffectivenessResponse",
    "DataQualityResponse",
    "FidelityDashboardResponse",
    "HealthResponse",
    "ImpactReportResponse",
    "LearningGainsResponse",
    "PerformanceNodeResponse",
]
