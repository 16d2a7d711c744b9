from gains.analyzer import (
    STATUS_INSUFFICIENT,
    STATUS_OK,
    LearningDomainGain,
    LearningGainsData,
    analyze_learning_gains,
    gains_from_snapshot,
    improvement_index,
)

__all__ = [
    "STATUS_INSUFFICIENT",
    "STATUS_OK",
    "LearningDomainGain",
    "LearningGainsData",
    "analyze_learning_gains",
    "gains_from_snapshot",
    "improvement_index",
]
