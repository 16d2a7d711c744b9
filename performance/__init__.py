"""
performance package marker.
"""

from performance.eligibility import WEANING_THRESHOLD, is_weaning_eligible, weaning_gaps
from performance.tree import (
    NodeLevel,
    PerformanceNode,
    build_performance_tree,
    build_tree_from_snapshot,
    find_node,
    iter_nodes,
)

__all__ = [
    "NodeLevel",
    "PerformanceNode",
    "WEANING_THRESHOLD",
    "build_performance_tree",
    "build_tree_from_snapshot",
    "find_node",
    "is_weaning_eligible",
    "iter_nodes",
    "weaning_gaps",
]
