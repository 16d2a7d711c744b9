"""
performance/tree.py

Tree Aggregator: School -> Sub-County -> District -> Region -> Country.

The tree is rebuilt from the record snapshot on every request and is
immutable once built. Construction runs in two passes:

    Pass 1  bucket School leaves by (region, district, sub-county)
    Pass 2  build parents bottom-up; each parent's scores are the
            field-wise mean of its direct children and its school_count
            is the sum of its children's school counts

Every node owns its children outright (a tuple), so there are no parent
back-references. Children are sorted by name at every level.

A parent with no children carries all-zero scores and school_count 0.
Callers must render that as "no data", not as a genuine zero score.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from hierarchy.resolver import HierarchyPath, resolve_path
from hierarchy.scope import Scope
from performance.eligibility import WEANING_THRESHOLD, is_weaning_eligible, weaning_gaps
from records.normalizer import NormalizedSnapshot, normalize_records
from records.types import RawRecord, ScoreCard

logger = logging.getLogger(__name__)

COUNTRY_NODE_ID = "country-uganda"
COUNTRY_NODE_NAME = "Uganda (National)"


class NodeLevel:
    COUNTRY = "Country"
    REGION = "Region"
    DISTRICT = "District"
    SUB_COUNTY = "Sub-County"
    SCHOOL = "School"


@dataclass(frozen=True)
class PerformanceNode:
    id: str
    name: str
    level: str
    scores: ScoreCard
    children: tuple["PerformanceNode", ...] = ()
    school_count: int = 0
    weaning_eligible: bool | None = None
    """Set for School nodes only; None everywhere else."""
    weaning_gaps: dict[str, float] | None = None
    """Shortfall per dimension below the weaning threshold; School nodes only."""

    @property
    def has_data(self) -> bool:
        return self.school_count > 0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_performance_tree(
    records: Sequence[RawRecord],
    *,
    scope: Scope | None = None,
    weaning_threshold: float = WEANING_THRESHOLD,
) -> PerformanceNode:
    """Normalize *records* (optionally restricted to *scope*) and build the tree."""
    return build_tree_from_snapshot(
        normalize_records(records, scope=scope),
        weaning_threshold=weaning_threshold,
    )


def build_tree_from_snapshot(
    snapshot: NormalizedSnapshot,
    *,
    weaning_threshold: float = WEANING_THRESHOLD,
) -> PerformanceNode:
    """Build the Country-rooted tree from an existing snapshot."""
    buckets = _bucket_schools(snapshot, weaning_threshold)

    region_nodes: list[PerformanceNode] = []
    for region, districts in buckets.items():
        district_nodes: list[PerformanceNode] = []
        for district, sub_counties in districts.items():
            sub_county_nodes = [
                _parent(f"subcounty-{district}-{sub_county}", sub_county, NodeLevel.SUB_COUNTY, schools)
                for sub_county, schools in sub_counties.items()
            ]
            district_nodes.append(
                _parent(f"district-{district}", district, NodeLevel.DISTRICT, sub_county_nodes)
            )
        region_nodes.append(_parent(f"region-{region}", region, NodeLevel.REGION, district_nodes))

    root = _parent(COUNTRY_NODE_ID, COUNTRY_NODE_NAME, NodeLevel.COUNTRY, region_nodes)
    logger.debug(
        "Performance tree built regions=%d schools=%d",
        len(root.children),
        root.school_count,
    )
    return root


def iter_nodes(node: PerformanceNode) -> Iterator[PerformanceNode]:
    """Depth-first, pre-order walk over *node* and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_node(root: PerformanceNode, node_id: str) -> PerformanceNode | None:
    """Locate a node by id for the drill-down profile view."""
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


_Buckets = dict[str, dict[str, dict[str, list[PerformanceNode]]]]


def _bucket_schools(snapshot: NormalizedSnapshot, weaning_threshold: float) -> _Buckets:
    """Pass 1: one School leaf per school with a ScoreCard, grouped by ancestors."""
    buckets: _Buckets = {}
    for school_key, (record, scorecard) in snapshot.scorecards.items():
        path = snapshot.paths.get(school_key) or resolve_path(record)
        leaf = _school(school_key, path, scorecard, weaning_threshold)
        (
            buckets.setdefault(path.region, {})
            .setdefault(path.district, {})
            .setdefault(path.sub_county, [])
            .append(leaf)
        )
    return buckets


def _school(
    school_key: str,
    path: HierarchyPath,
    scorecard: ScoreCard,
    weaning_threshold: float,
) -> PerformanceNode:
    return PerformanceNode(
        id=f"school-{school_key}",
        name=path.school_name or school_key,
        level=NodeLevel.SCHOOL,
        scores=scorecard,
        school_count=1,
        weaning_eligible=is_weaning_eligible(scorecard, weaning_threshold),
        weaning_gaps=weaning_gaps(scorecard, weaning_threshold),
    )


def _parent(
    node_id: str,
    name: str,
    level: str,
    children: list[PerformanceNode],
) -> PerformanceNode:
    """Pass 2: aggregate direct children into an immutable parent."""
    ordered = tuple(sorted(children, key=_name_key))
    return PerformanceNode(
        id=node_id,
        name=name,
        level=level,
        scores=ScoreCard.mean_of([child.scores for child in ordered]),
        children=ordered,
        school_count=sum(child.school_count for child in ordered),
    )


def _name_key(node: PerformanceNode) -> tuple[str, str, str]:
    return (node.name.casefold(), node.name, node.id)
