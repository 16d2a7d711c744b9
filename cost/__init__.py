from cost.calculator import (
    CostBreakdownItem,
    CostEffectivenessData,
    calculate_cost_effectiveness,
    cost_from_snapshot,
)
from cost.coverage import Coverage, measure_coverage

__all__ = [
    "CostBreakdownItem",
    "CostEffectivenessData",
    "Coverage",
    "calculate_cost_effectiveness",
    "cost_from_snapshot",
    "measure_coverage",
]
