from fidelity.dashboard import (
    FidelityDashboardData,
    FidelityRanking,
    build_dashboard_from_snapshot,
    build_fidelity_dashboard,
)
from fidelity.scoring import (
    FidelityBand,
    FidelityCompositeScorer,
    FidelityDriver,
    FidelityScore,
    classify_band,
)

__all__ = [
    "FidelityBand",
    "FidelityCompositeScorer",
    "FidelityDashboardData",
    "FidelityDriver",
    "FidelityRanking",
    "FidelityScore",
    "build_dashboard_from_snapshot",
    "build_fidelity_dashboard",
    "classify_band",
]
