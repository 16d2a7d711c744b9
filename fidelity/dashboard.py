"""
fidelity/dashboard.py

Fidelity dashboard: the scope's own score, one score per child-level unit
present in the records, and a ranking of those children.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from fidelity.scoring import FidelityCompositeScorer, FidelityScore
from hierarchy.scope import Scope, unit_identifier, unit_name
from records.normalizer import NormalizedSnapshot, normalize_records
from records.types import RawRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FidelityRanking:
    name: str
    score: float
    band: str


@dataclass(frozen=True)
class FidelityDashboardData:
    scope: FidelityScore
    children: tuple[FidelityScore, ...]
    rankings: tuple[FidelityRanking, ...]


def build_fidelity_dashboard(
    scope: Scope,
    records: Sequence[RawRecord],
    *,
    scorer: FidelityCompositeScorer | None = None,
    period: str | None = None,
) -> FidelityDashboardData:
    """Normalize *records* for *scope* and build its dashboard."""
    return build_dashboard_from_snapshot(
        normalize_records(records, scope=scope),
        scorer=scorer,
        period=period,
    )


def build_dashboard_from_snapshot(
    snapshot: NormalizedSnapshot,
    *,
    scorer: FidelityCompositeScorer | None = None,
    period: str | None = None,
) -> FidelityDashboardData:
    active_scorer = scorer or FidelityCompositeScorer()
    scope_score = active_scorer.score(snapshot, period=period)

    children: list[FidelityScore] = []
    child_level = snapshot.scope.child_level()
    if child_level is not None:
        for identifier, name in child_units(snapshot, child_level):
            child_snapshot = normalize_records(
                snapshot.records,
                scope=Scope(level=child_level, identifier=identifier),
            )
            children.append(active_scorer.score(child_snapshot, period=period, scope_name=name))

    rankings = sorted(
        (FidelityRanking(name=child.scope_name, score=child.total_score, band=child.band) for child in children),
        key=lambda item: (-item.score, item.name.casefold(), item.name),
    )
    logger.debug(
        "Fidelity dashboard scope=%s:%s children=%d",
        snapshot.scope.level,
        snapshot.scope.identifier,
        len(children),
    )
    return FidelityDashboardData(
        scope=scope_score,
        children=tuple(children),
        rankings=tuple(rankings),
    )


def child_units(snapshot: NormalizedSnapshot, level: str) -> list[tuple[str, str]]:
    """(identifier, display name) of every unit at *level* among the snapshot's schools."""
    units: dict[str, str] = {}
    for path in snapshot.paths.values():
        units.setdefault(unit_identifier(path, level), unit_name(path, level))
    return sorted(units.items(), key=lambda item: (item[1].casefold(), item[1], item[0]))
