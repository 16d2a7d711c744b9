"""
cost/coverage.py

Coverage counts used as cost-ratio denominators. Every count is taken
from the same scope-restricted snapshot the cost entries are matched to.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from records.normalizer import (
    NormalizedSnapshot,
    assessment_stage,
    domain_reading,
    learner_identity,
)
from records.payload import payload_list, payload_number, payload_text
from records.types import LEARNING_DOMAINS, AssessmentStage, RawRecord, RecordModule


@dataclass(frozen=True)
class Coverage:
    schools_supported: int
    teachers_trained: int
    learners_assessed: int
    learners_improved: int


def measure_coverage(snapshot: NormalizedSnapshot) -> Coverage:
    baseline, endline = _learner_means(snapshot)
    assessed = set(baseline) | set(endline)
    improved = sum(
        1 for learner in set(baseline) & set(endline) if endline[learner] > baseline[learner]
    )
    return Coverage(
        schools_supported=len(snapshot.school_keys),
        teachers_trained=teachers_trained(snapshot),
        learners_assessed=len(assessed),
        learners_improved=improved,
    )


def teachers_trained(snapshot: NormalizedSnapshot) -> int:
    """Attendance summed over completed trainings."""
    total = 0
    for record in snapshot.records_for(RecordModule.TRAINING):
        if payload_text(record.payload, "trainingStatus").casefold() != "completed":
            continue
        attended = int(payload_number(record.payload, "numberAttended"))
        if attended <= 0:
            attended = len(payload_list(record.payload, "participants"))
        total += attended
    return total


def _learner_means(
    snapshot: NormalizedSnapshot,
) -> tuple[dict[tuple[str, str], float], dict[tuple[str, str], float]]:
    """Mean domain reading per learner for the baseline and endline stages."""
    readings: dict[str, dict[tuple[str, str], list[float]]] = {
        AssessmentStage.BASELINE: defaultdict(list),
        AssessmentStage.ENDLINE: defaultdict(list),
    }
    for record in snapshot.records_for(RecordModule.ASSESSMENT):
        stage = assessment_stage(record)
        if stage not in readings:
            continue
        values = [
            value
            for value in (domain_reading(record, domain) for domain in LEARNING_DOMAINS)
            if value is not None
        ]
        if values:
            readings[stage][_learner_key(record)].extend(values)

    baseline = {key: sum(vals) / len(vals) for key, vals in readings[AssessmentStage.BASELINE].items()}
    endline = {key: sum(vals) / len(vals) for key, vals in readings[AssessmentStage.ENDLINE].items()}
    return baseline, endline


def _learner_key(record: RawRecord) -> tuple[str, str]:
    # Anonymous readings count as their own learner.
    identity = learner_identity(record) or f"record:{record.id}"
    return (record.school_key or "", identity)
