from recommendations.catalog import (
    RECOMMENDATION_CATALOG,
    Recommendation,
    RecommendationSignals,
    applicable_recommendations,
)

__all__ = [
    "RECOMMENDATION_CATALOG",
    "Recommendation",
    "RecommendationSignals",
    "applicable_recommendations",
]
