"""
gains/analyzer.py

Learning Gains Analyzer.

For every learning domain, baseline and endline readings (split by the
explicit assessment stage, never by date) are averaged and compared.
``change`` exists only when both sides have readings. The scope-level
Improvement Index is the mean of the non-null changes and stays None when
no domain has a complete pair: None means "insufficient data", 0.0 means
"no change".

Benchmark distribution
----------------------
Readings are on a 0-100 percent scale and banded as

    below benchmark   value < 42
    approaching       42 <= value < 70
    at benchmark      value >= 70

using endline readings, or baseline readings when no endline exists.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from hierarchy.scope import Scope
from records.normalizer import DomainSamples, NormalizedSnapshot, normalize_records
from records.types import LEARNING_DOMAINS, RawRecord

logger = logging.getLogger(__name__)

APPROACHING_BENCHMARK: Final[float] = 42.0
AT_BENCHMARK: Final[float] = 70.0

STATUS_OK = "ok"
STATUS_INSUFFICIENT = "insufficient data"


@dataclass(frozen=True)
class LearningDomainGain:
    domain: str
    label: str
    baseline_avg: float | None
    endline_avg: float | None
    change: float | None
    sample_size: int
    baseline_count: int
    endline_count: int
    below_benchmark_pct: float | None = None
    approaching_pct: float | None = None
    at_benchmark_pct: float | None = None

    @property
    def status(self) -> str:
        return STATUS_OK if self.change is not None else STATUS_INSUFFICIENT


@dataclass(frozen=True)
class LearningGainsData:
    period: str | None
    domains: tuple[LearningDomainGain, ...]
    school_improvement_index: float | None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_learning_gains(
    records: Sequence[RawRecord],
    *,
    scope: Scope | None = None,
    period: str | None = None,
) -> LearningGainsData:
    """Normalize *records* (optionally restricted to *scope*) and analyze gains."""
    return gains_from_snapshot(normalize_records(records, scope=scope), period=period)


def gains_from_snapshot(snapshot: NormalizedSnapshot, *, period: str | None = None) -> LearningGainsData:
    domains = tuple(
        domain_gain(snapshot.domain_samples[domain.key])
        for domain in LEARNING_DOMAINS
        if domain.key in snapshot.domain_samples
    )
    index = improvement_index(domains)
    logger.debug(
        "Learning gains scope=%s:%s complete_domains=%d index=%s",
        snapshot.scope.level,
        snapshot.scope.identifier,
        sum(1 for gain in domains if gain.change is not None),
        index,
    )
    return LearningGainsData(period=period, domains=domains, school_improvement_index=index)


def domain_gain(samples: DomainSamples) -> LearningDomainGain:
    """Averages, change and benchmark distribution for one domain."""
    baseline_avg = _mean(samples.baseline)
    endline_avg = _mean(samples.endline)
    change = None
    if baseline_avg is not None and endline_avg is not None:
        change = endline_avg - baseline_avg

    below, approaching, at = benchmark_distribution(samples.endline or samples.baseline)
    return LearningDomainGain(
        domain=samples.domain.key,
        label=samples.domain.label,
        baseline_avg=baseline_avg,
        endline_avg=endline_avg,
        change=change,
        sample_size=len(samples.baseline) + len(samples.endline),
        baseline_count=len(samples.baseline),
        endline_count=len(samples.endline),
        below_benchmark_pct=below,
        approaching_pct=approaching,
        at_benchmark_pct=at,
    )


def improvement_index(domains: Sequence[LearningDomainGain]) -> float | None:
    """Mean of the non-null domain changes; None when there are none."""
    changes = [gain.change for gain in domains if gain.change is not None]
    if not changes:
        return None
    return sum(changes) / len(changes)


def benchmark_distribution(
    readings: Sequence[float],
) -> tuple[float | None, float | None, float | None]:
    """Percent of *readings* below, approaching and at benchmark."""
    if not readings:
        return None, None, None
    total = len(readings)
    below = sum(1 for value in readings if value < APPROACHING_BENCHMARK)
    at = sum(1 for value in readings if value >= AT_BENCHMARK)
    approaching = total - below - at
    return (
        round(100.0 * below / total, 1),
        round(100.0 * approaching / total, 1),
        round(100.0 * at / total, 1),
    )


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)
