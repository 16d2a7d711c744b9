"""
records package marker.

Only the dependency-free types are re-exported here; import the
normalizer from ``records.normalizer`` directly.
"""

from records.types import (
    AssessmentStage,
    CostCategory,
    CostEntry,
    LearningDomain,
    RawRecord,
    RecordModule,
    RecordStatus,
    ScoreCard,
)

__all__ = [
    "AssessmentStage",
    "CostCategory",
    "CostEntry",
    "LearningDomain",
    "RawRecord",
    "RecordModule",
    "RecordStatus",
    "ScoreCard",
]
