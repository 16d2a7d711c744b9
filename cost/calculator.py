"""
cost/calculator.py

Cost-Effectiveness Calculator.

Formulas
--------
total_cost                 = sum(entry.amount) over matched entries
cost_per_school            = total_cost / schools_supported
cost_per_teacher           = total_cost / teachers_trained
cost_per_learner_assessed  = total_cost / learners_assessed
cost_per_learner_improved  = total_cost / learners_improved

Matched entries are those whose own scope lies inside the requested scope
and whose period matches (all periods when none is requested). An entry
attributed to a wider scope than the one requested is never matched, so a
ratio never divides by a count from a different scope.

Division-by-zero cases return None for the affected ratio.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from cost.coverage import Coverage, measure_coverage
from hierarchy.resolver import (
    COUNTRY_NAME,
    UNKNOWN_SUB_COUNTY,
    HierarchyPath,
    canonical_district,
    resolve_region,
)
from hierarchy.scope import InvalidScopeError, Scope, ScopeLevel
from records.normalizer import NormalizedSnapshot, normalize_records, sum_costs_by_category
from records.types import CostCategory, CostEntry, RawRecord

logger = logging.getLogger(__name__)

_SENTINEL = None  # value stored when a ratio cannot be computed


@dataclass(frozen=True)
class CostBreakdownItem:
    category: str
    amount: float


@dataclass(frozen=True)
class CostEffectivenessData:
    total_cost: float
    cost_per_school: float | None
    cost_per_teacher: float | None
    cost_per_learner_assessed: float | None
    cost_per_learner_improved: float | None
    breakdown: tuple[CostBreakdownItem, ...]
    period: str | None
    coverage: Coverage


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def calculate_cost_effectiveness(
    records: Sequence[RawRecord],
    cost_entries: Sequence[CostEntry],
    *,
    scope: Scope | None = None,
    period: str | None = None,
) -> CostEffectivenessData:
    """Normalize *records* for *scope* and compute its cost ratios."""
    snapshot = normalize_records(records, scope=scope, cost_entries=cost_entries)
    return cost_from_snapshot(snapshot, period=period)


def cost_from_snapshot(snapshot: NormalizedSnapshot, *, period: str | None = None) -> CostEffectivenessData:
    entries = matching_entries(snapshot, period)
    totals = sum_costs_by_category(entries)
    total_cost = round(sum(totals.values()), 2)
    coverage = measure_coverage(snapshot)

    result = CostEffectivenessData(
        total_cost=total_cost,
        cost_per_school=_cost_per(total_cost, coverage.schools_supported),
        cost_per_teacher=_cost_per(total_cost, coverage.teachers_trained),
        cost_per_learner_assessed=_cost_per(total_cost, coverage.learners_assessed),
        cost_per_learner_improved=_cost_per(total_cost, coverage.learners_improved),
        breakdown=tuple(
            CostBreakdownItem(category=category, amount=round(totals[category], 2))
            for category in CostCategory.ORDERED
            if totals.get(category, 0.0) != 0.0
        ),
        period=period,
        coverage=coverage,
    )
    logger.debug(
        "Cost effectiveness scope=%s:%s entries=%d/%d total=%.2f coverage=%s",
        snapshot.scope.level,
        snapshot.scope.identifier,
        len(entries),
        len(snapshot.cost_entries),
        total_cost,
        coverage,
    )
    return result


def matching_entries(snapshot: NormalizedSnapshot, period: str | None) -> list[CostEntry]:
    """Cost entries inside the snapshot's scope and period."""
    wanted_period = (period or "").strip().casefold()
    matched: list[CostEntry] = []
    for entry in snapshot.cost_entries:
        if wanted_period and entry.period.strip().casefold() != wanted_period:
            continue
        if entry_in_scope(entry, snapshot):
            matched.append(entry)
    return matched


def entry_in_scope(entry: CostEntry, snapshot: NormalizedSnapshot) -> bool:
    """True when the entry's own scope lies inside the snapshot's scope."""
    scope = snapshot.scope
    try:
        entry_scope = Scope.parse(entry.scope_type, entry.scope_value or None)
    except InvalidScopeError:
        logger.debug("Cost entry with unusable scope %r/%r skipped", entry.scope_type, entry.scope_value)
        return False

    entry_depth = ScopeLevel.ORDERED.index(entry_scope.level)
    if entry_depth < ScopeLevel.ORDERED.index(scope.level):
        return False
    if entry_scope.level == ScopeLevel.COUNTRY:
        return True
    if entry_scope.level in (ScopeLevel.REGION, ScopeLevel.DISTRICT):
        return scope.contains(_static_path(entry_scope))
    # Sub-county and school units are only known through the records,
    # which the snapshot has already restricted to the scope.
    return any(entry_scope.contains(path) for path in snapshot.paths.values())


# ---------------------------------------------------------------------------
# Private formula helpers
# ---------------------------------------------------------------------------


def _cost_per(total_cost: float, count: int) -> float | None:
    if count <= 0:
        return _SENTINEL
    return round(total_cost / count, 2)


def _static_path(entry_scope: Scope) -> HierarchyPath:
    if entry_scope.level == ScopeLevel.REGION:
        region, district = entry_scope.identifier, ""
    else:
        district = canonical_district(entry_scope.identifier)
        region = resolve_region(district)
    return HierarchyPath(
        country=COUNTRY_NAME,
        region=region,
        district=district,
        sub_county=UNKNOWN_SUB_COUNTY,
        school_id=None,
        school_name="",
    )
