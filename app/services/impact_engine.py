"""
app/services/impact_engine.py

Impact engine service.

Normalizes one scope's record snapshot once, then runs every analyzer over
it as an independent task:

    performance         Tree Aggregator (+ weaning eligibility)
    fidelity            Fidelity dashboard (scope, children, rankings)
    learning_gains      Learning Gains Analyzer
    cost_effectiveness  Cost-Effectiveness Calculator
    data_quality        Data Quality Monitor

Analyzers share no mutable state, so they run on a thread pool and are
joined before the report is assembled. Recommendations are matched last
from the joined results.

Failure contract
----------------
- Sparse or malformed data never raises; analyzers degrade to partial results.
- An exception inside an analyzer is logged and re-raised as ImpactEngineError.
- The engine performs no I/O; fetching records is the caller's job.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from app.config import EngineSettings, get_engine_settings
from app.logging_utils import log_event
from cost import CostEffectivenessData, cost_from_snapshot
from fidelity import FidelityCompositeScorer, FidelityDashboardData, build_dashboard_from_snapshot
from fidelity.config import load_driver_sets
from fidelity.drivers import ObservationCoverageDriver
from gains import LearningGainsData, gains_from_snapshot
from hierarchy.scope import Scope
from performance import PerformanceNode, build_tree_from_snapshot
from quality import DataQualitySummary, quality_from_snapshot
from recommendations import Recommendation, RecommendationSignals, applicable_recommendations
from records.normalizer import normalize_records
from records.types import CostEntry, RawRecord

logger = logging.getLogger(__name__)


class ImpactEngineError(RuntimeError):
    """Raised when an analyzer fails unexpectedly."""


@dataclass(frozen=True)
class ImpactReport:
    scope: Scope
    period: str | None
    performance: PerformanceNode
    fidelity: FidelityDashboardData
    learning_gains: LearningGainsData
    cost_effectiveness: CostEffectivenessData
    data_quality: DataQualitySummary
    recommendations: tuple[Recommendation, ...]
    generated_at: datetime


class ImpactEngine:
    """Runs the analyzers for one scope and assembles their results.

    Stateless between calls; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        scorer: FidelityCompositeScorer | None = None,
    ) -> None:
        """
        Args:
            settings: Engine settings; read from the environment when omitted.
            scorer: Fidelity scorer; built from the configured driver sets
                when omitted.
        """
        self._settings = settings or get_engine_settings()
        self._scorer = scorer or FidelityCompositeScorer(
            load_driver_sets(self._settings.fidelity_driver_config_path),
            observation_visits_target=self._settings.observation_visits_target,
        )
        self._coverage_driver = ObservationCoverageDriver(self._settings.observation_visits_target)

    # ------------------------------------------------------------------
    # Single analyzers
    # ------------------------------------------------------------------

    def performance(self, scope: Scope, records: Sequence[RawRecord]) -> PerformanceNode:
        return build_tree_from_snapshot(
            normalize_records(records, scope=scope),
            weaning_threshold=self._settings.weaning_threshold,
        )

    def fidelity(
        self,
        scope: Scope,
        records: Sequence[RawRecord],
        *,
        period: str | None = None,
    ) -> FidelityDashboardData:
        return build_dashboard_from_snapshot(
            normalize_records(records, scope=scope),
            scorer=self._scorer,
            period=period,
        )

    def learning_gains(
        self,
        scope: Scope,
        records: Sequence[RawRecord],
        *,
        period: str | None = None,
    ) -> LearningGainsData:
        return gains_from_snapshot(normalize_records(records, scope=scope), period=period)

    def cost_effectiveness(
        self,
        scope: Scope,
        records: Sequence[RawRecord],
        cost_entries: Sequence[CostEntry],
        *,
        period: str | None = None,
    ) -> CostEffectivenessData:
        snapshot = normalize_records(records, scope=scope, cost_entries=cost_entries)
        return cost_from_snapshot(snapshot, period=period)

    def data_quality(self, scope: Scope, records: Sequence[RawRecord]) -> DataQualitySummary:
        return quality_from_snapshot(normalize_records(records, scope=scope))

    # ------------------------------------------------------------------
    # Full report
    # ------------------------------------------------------------------

    def run(
        self,
        scope: Scope,
        records: Sequence[RawRecord],
        *,
        cost_entries: Sequence[CostEntry] = (),
        period: str | None = None,
    ) -> ImpactReport:
        """Run every analyzer in parallel and assemble one report.

        Args:
            scope: Validated scope to aggregate over.
            records: Record snapshot supplied by the record store.
            cost_entries: Cost lines; matched to the scope by the calculator.
            period: Reporting period used for cost matching and echoed on results.

        Returns:
            ImpactReport with every analyzer's result and the matching
            recommendations.

        Raises:
            ImpactEngineError: If any analyzer raised.
        """
        started = time.perf_counter()
        snapshot = normalize_records(records, scope=scope, cost_entries=cost_entries)

        tasks: dict[str, Callable[[], Any]] = {
            "performance": lambda: build_tree_from_snapshot(
                snapshot, weaning_threshold=self._settings.weaning_threshold
            ),
            "fidelity": lambda: build_dashboard_from_snapshot(
                snapshot, scorer=self._scorer, period=period
            ),
            "learning_gains": lambda: gains_from_snapshot(snapshot, period=period),
            "cost_effectiveness": lambda: cost_from_snapshot(snapshot, period=period),
            "data_quality": lambda: quality_from_snapshot(snapshot),
        }
        results = self._run_parallel(tasks)

        fidelity: FidelityDashboardData = results["fidelity"]
        gains: LearningGainsData = results["learning_gains"]
        quality: DataQualitySummary = results["data_quality"]
        recommendations = applicable_recommendations(
            recommendation_signals(
                fidelity=fidelity,
                gains=gains,
                quality=quality,
                observation_coverage=self._coverage_driver.compute(snapshot).score,
            )
        )

        log_event(
            logger,
            logging.INFO,
            "impact_report_built",
            scope_type=scope.level,
            scope_id=scope.identifier,
            period=period,
            records=len(snapshot.records),
            schools=len(snapshot.school_keys),
            fidelity_score=fidelity.scope.total_score,
            recommendations=len(recommendations),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return ImpactReport(
            scope=scope,
            period=period,
            performance=results["performance"],
            fidelity=fidelity,
            learning_gains=gains,
            cost_effectiveness=results["cost_effectiveness"],
            data_quality=quality,
            recommendations=tuple(recommendations),
            generated_at=datetime.now(timezone.utc),
        )

    def _run_parallel(self, tasks: dict[str, Callable[[], Any]]) -> dict[str, Any]:
        results: dict[str, Any] = {}
        failures: dict[str, Exception] = {}

        with ThreadPoolExecutor(max_workers=self._settings.max_workers) as executor:
            future_to_name = {executor.submit(task): name for name, task in tasks.items()}
            for future in as_completed(future_to_name):
                name = future_to_name[future]
                try:
                    results[name] = future.result()
                except Exception as exc:
                    logger.error("Analyzer %s failed: %s", name, exc, exc_info=True)
                    failures[name] = exc

        if failures:
            first = next(iter(failures.values()))
            raise ImpactEngineError(
                f"Analyzer failure: {', '.join(sorted(failures))}"
            ) from first
        return results


def recommendation_signals(
    *,
    fidelity: FidelityDashboardData,
    gains: LearningGainsData,
    quality: DataQualitySummary,
    observation_coverage: float,
) -> RecommendationSignals:
    return RecommendationSignals(
        fidelity_score=fidelity.scope.total_score,
        domain_changes=tuple(gain.change for gain in gains.domains),
        schools_missing_baseline=quality.schools_missing_baseline,
        schools_missing_endline=quality.schools_missing_endline,
        outlier_count=quality.outlier_count,
        observation_coverage=observation_coverage,
    )


@lru_cache(maxsize=1)
def get_impact_engine() -> ImpactEngine:
    """
    Build and cache the engine with env-driven settings.
    """
    return ImpactEngine(get_engine_settings())
