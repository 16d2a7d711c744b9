"""
quality/monitor.py

Data Quality Monitor.

completeness    share of expected baseline + endline (school, stage) pairs
                actually recorded, scope-wide
outliers        ScoreCard values outside [0, 10] and learning-domain
                scores outside [0, 100]; annotated, never removed
duplicates      identities seen more than once inside one cohort window,
                matched case- and whitespace-insensitively; each identity
                seen n times contributes n - 1

Duplicates are reported as counts only so that learner names never leave
the record store's secure views.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import Final

from hierarchy.resolver import canonical_district
from hierarchy.scope import Scope
from records.normalizer import (
    NormalizedSnapshot,
    assessment_stage,
    assessment_stage_pairs,
    domain_reading,
    learner_identity,
    normalize_identity,
    normalize_records,
    raw_scorecard_values,
)
from records.payload import payload_list, payload_text
from records.types import (
    LEARNING_DOMAINS,
    SCORECARD_FIELDS,
    SCORECARD_MAX,
    SCORECARD_MIN,
    AssessmentStage,
    RawRecord,
    RecordModule,
)

logger = logging.getLogger(__name__)

DOMAIN_SCORE_MIN: Final[float] = 0.0
DOMAIN_SCORE_MAX: Final[float] = 100.0

EXPECTED_STAGES: Final[tuple[str, ...]] = (AssessmentStage.BASELINE, AssessmentStage.ENDLINE)


@dataclass(frozen=True)
class OutlierFlag:
    record_id: int
    field: str
    value: float


@dataclass(frozen=True)
class DataQualitySummary:
    completeness_score: float
    schools_missing_baseline: int
    schools_missing_endline: int
    outlier_count: int
    duplicate_learners_detected: int
    duplicate_teachers_detected: int = 0
    outliers: tuple[OutlierFlag, ...] = ()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def assess_data_quality(
    records: Sequence[RawRecord],
    *,
    scope: Scope | None = None,
) -> DataQualitySummary:
    """Normalize *records* (optionally restricted to *scope*) and summarize quality."""
    return quality_from_snapshot(normalize_records(records, scope=scope))


def quality_from_snapshot(snapshot: NormalizedSnapshot) -> DataQualitySummary:
    schools = snapshot.school_keys
    pairs = assessment_stage_pairs(snapshot.records)

    missing_baseline = sum(1 for school in schools if (school, AssessmentStage.BASELINE) not in pairs)
    missing_endline = sum(1 for school in schools if (school, AssessmentStage.ENDLINE) not in pairs)
    present = len(schools) * len(EXPECTED_STAGES) - missing_baseline - missing_endline

    outliers = tuple(find_outliers(snapshot.records))
    summary = DataQualitySummary(
        completeness_score=completeness(present, len(schools) * len(EXPECTED_STAGES)),
        schools_missing_baseline=missing_baseline,
        schools_missing_endline=missing_endline,
        outlier_count=len(outliers),
        duplicate_learners_detected=count_duplicate_learners(snapshot.records),
        duplicate_teachers_detected=count_duplicate_teachers(snapshot.records),
        outliers=outliers,
    )
    logger.debug(
        "Data quality scope=%s:%s completeness=%.1f outliers=%d dup_learners=%d dup_teachers=%d",
        snapshot.scope.level,
        snapshot.scope.identifier,
        summary.completeness_score,
        summary.outlier_count,
        summary.duplicate_learners_detected,
        summary.duplicate_teachers_detected,
    )
    return summary


def completeness(present: int, expected: int) -> float:
    """Percent of expected data points present; 0.0 when nothing is expected."""
    if expected <= 0:
        return 0.0
    return round(100.0 * present / expected, 1)


# ---------------------------------------------------------------------------
# Outliers
# ---------------------------------------------------------------------------


def find_outliers(records: Iterable[RawRecord]) -> list[OutlierFlag]:
    flags: list[OutlierFlag] = []
    for record in records:
        if record.module != RecordModule.ASSESSMENT:
            continue
        values = raw_scorecard_values(record) or {}
        for name, value in values.items():
            if not SCORECARD_MIN <= value <= SCORECARD_MAX:
                flags.append(OutlierFlag(record.id, SCORECARD_FIELDS[name], value))
        for domain in LEARNING_DOMAINS:
            reading = domain_reading(record, domain)
            if reading is not None and not DOMAIN_SCORE_MIN <= reading <= DOMAIN_SCORE_MAX:
                flags.append(OutlierFlag(record.id, domain.payload_key, reading))
    return flags


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------


def count_duplicate_learners(records: Iterable[RawRecord]) -> int:
    """Repeat learner identities per (school, stage, year, term) window."""
    keys = []
    for record in records:
        if record.module != RecordModule.ASSESSMENT:
            continue
        identity = learner_identity(record)
        if identity is None:
            continue
        window = (
            record.school_key or "",
            assessment_stage(record) or "",
            record.date.year,
            normalize_identity(payload_text(record.payload, "term")),
        )
        keys.append((window, identity))
    return count_repeats(keys)


def count_duplicate_teachers(records: Iterable[RawRecord]) -> int:
    """Repeat training participants per (school or district, year) window."""
    keys = []
    for record in records:
        if record.module != RecordModule.TRAINING:
            continue
        window = (record.school_key or canonical_district(record.district), record.date.year)
        for participant in payload_list(record.payload, "participants"):
            identity = normalize_identity(participant)
            if identity:
                keys.append((window, identity))
    return count_repeats(keys)


def count_repeats(keys: Iterable[Hashable]) -> int:
    """Sum of (occurrences - 1) over every key seen more than once."""
    return sum(count - 1 for count in Counter(keys).values() if count > 1)
