"""
fidelity/scoring.py

Fidelity Composite Scorer.

Runs the configured drivers for a scope, combines them into a weighted
mean and classifies the result into a band. A scope with no schools still
yields a well-formed score (0.0, "High priority").
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fidelity.base import BaseFidelityDriver
from fidelity.config import DriverSets, DriverWeight, load_driver_sets
from fidelity.drivers import DEFAULT_OBSERVATION_VISITS_TARGET, build_driver_registry
from records.normalizer import NormalizedSnapshot

logger = logging.getLogger(__name__)


class FidelityBand:
    STRONG = "Strong"
    DEVELOPING = "Developing"
    NEEDS_SUPPORT = "Needs support"
    HIGH_PRIORITY = "High priority"


# ---------------------------------------------------------------------------
# Band classification - thresholds are inclusive lower bounds
# ---------------------------------------------------------------------------

_BAND_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (75.0, FidelityBand.STRONG),
    (50.0, FidelityBand.DEVELOPING),
    (25.0, FidelityBand.NEEDS_SUPPORT),
)


def classify_band(score: float) -> str:
    """Map a composite score in [0, 100] to its band label.

    Args:
        score: Composite fidelity score.

    Returns:
        "Strong", "Developing", "Needs support", or "High priority".
    """
    for threshold, label in _BAND_THRESHOLDS:
        if score >= threshold:
            return label
    return FidelityBand.HIGH_PRIORITY


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FidelityDriver:
    driver: str
    label: str
    score: float
    detail: str
    weight: float = 1.0


@dataclass(frozen=True)
class FidelityScore:
    scope_type: str
    scope_id: str
    scope_name: str
    total_score: float
    band: str
    drivers: tuple[FidelityDriver, ...]
    sample_size: int
    period: str | None = None


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------


class FidelityCompositeScorer:
    """Weighted composite of the driver set configured for each scope level.

    Driver sets default to the bundled configuration: every level runs
    observation coverage, training completion and assessment cycle
    completeness at equal weight.
    """

    def __init__(
        self,
        driver_sets: DriverSets | None = None,
        *,
        observation_visits_target: int = DEFAULT_OBSERVATION_VISITS_TARGET,
    ) -> None:
        self._driver_sets = driver_sets or load_driver_sets()
        self._registry: dict[str, BaseFidelityDriver] = build_driver_registry(
            observation_visits_target=observation_visits_target,
        )

    def driver_set(self, level: str) -> tuple[DriverWeight, ...]:
        return self._driver_sets.for_level(level)

    def score(
        self,
        snapshot: NormalizedSnapshot,
        *,
        period: str | None = None,
        scope_name: str | None = None,
    ) -> FidelityScore:
        """Score the scope covered by *snapshot*.

        Args:
            snapshot: Scope-restricted normalized records.
            period: Reporting period label echoed on the result.
            scope_name: Display name; defaults to the scope identifier.

        Returns:
            A FidelityScore; never raises on sparse data.
        """
        scope = snapshot.scope
        sample_size = len(snapshot.school_keys)
        drivers = tuple(
            self._run_driver(setting, snapshot) for setting in self.driver_set(scope.level)
        )

        if sample_size == 0:
            total = 0.0
        else:
            total = round(weighted_mean(drivers), 1)

        result = FidelityScore(
            scope_type=scope.level,
            scope_id=scope.identifier,
            scope_name=scope_name or scope.identifier,
            total_score=total,
            band=classify_band(total),
            drivers=drivers,
            sample_size=sample_size,
            period=period,
        )
        logger.debug(
            "Fidelity scope=%s:%s total=%.1f band=%s schools=%d",
            scope.level,
            scope.identifier,
            total,
            result.band,
            sample_size,
        )
        return result

    def _run_driver(self, setting: DriverWeight, snapshot: NormalizedSnapshot) -> FidelityDriver:
        driver = self._registry[setting.driver]
        outcome = driver.compute(snapshot)
        return FidelityDriver(
            driver=driver.key,
            label=driver.label,
            score=round(outcome.score, 1),
            detail=outcome.detail,
            weight=setting.weight,
        )


def weighted_mean(drivers: tuple[FidelityDriver, ...]) -> float:
    """Weighted mean of driver scores; 0.0 when the weights sum to zero."""
    total_weight = sum(driver.weight for driver in drivers)
    if total_weight <= 0:
        return 0.0
    return sum(driver.score * driver.weight for driver in drivers) / total_weight
