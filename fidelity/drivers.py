"""
fidelity/drivers.py

Concrete fidelity drivers.

observation_coverage           coaching / observation visits vs. the
                               per-school visit target
training_completion            completed trainings vs. all trainings logged
assessment_cycle_completeness  baseline + endline cycles present vs. expected
record_approval                approved records vs. submitted records
"""

from __future__ import annotations

from collections import Counter
from typing import Final

from fidelity.base import BaseFidelityDriver, DriverResult, ratio_score
from records.normalizer import NormalizedSnapshot, assessment_stage_pairs
from records.payload import payload_text
from records.types import AssessmentStage, RecordModule, RecordStatus

DEFAULT_OBSERVATION_VISITS_TARGET: Final[int] = 2


class ObservationCoverageDriver(BaseFidelityDriver):
    """Share of planned coaching visits actually made, capped per school."""

    key = "observation_coverage"
    label = "Coaching & observation coverage"

    def __init__(self, visits_target: int = DEFAULT_OBSERVATION_VISITS_TARGET) -> None:
        self._target = max(1, visits_target)

    def compute(self, snapshot: NormalizedSnapshot) -> DriverResult:
        schools = snapshot.school_keys
        visits = Counter(
            record.school_key
            for record in snapshot.records_for(RecordModule.VISIT)
            if record.school_key is not None and record.status != RecordStatus.DRAFT
        )
        planned = len(schools) * self._target
        completed = sum(min(visits.get(school, 0), self._target) for school in schools)
        return DriverResult(
            score=ratio_score(completed, planned),
            detail=(
                f"{completed} of {planned} planned visits "
                f"({len(schools)} schools, target {self._target} per school)"
            ),
        )


class TrainingCompletionDriver(BaseFidelityDriver):
    """Share of logged trainings whose status is Completed."""

    key = "training_completion"
    label = "Training completion rate"

    def compute(self, snapshot: NormalizedSnapshot) -> DriverResult:
        trainings = snapshot.records_for(RecordModule.TRAINING)
        if not trainings:
            return DriverResult(score=0.0, detail="No trainings recorded")
        completed = sum(
            1
            for record in trainings
            if payload_text(record.payload, "trainingStatus").casefold() == "completed"
        )
        return DriverResult(
            score=ratio_score(completed, len(trainings)),
            detail=f"{completed} of {len(trainings)} trainings completed",
        )


class AssessmentCycleDriver(BaseFidelityDriver):
    """Share of expected baseline and endline assessments present per school."""

    key = "assessment_cycle_completeness"
    label = "Assessment cycle completeness"

    def compute(self, snapshot: NormalizedSnapshot) -> DriverResult:
        schools = set(snapshot.school_keys)
        present = assessment_stage_pairs(snapshot.records) & {
            (school, stage)
            for school in schools
            for stage in (AssessmentStage.BASELINE, AssessmentStage.ENDLINE)
        }
        planned = len(schools) * 2
        return DriverResult(
            score=ratio_score(len(present), planned),
            detail=f"{len(present)} of {planned} baseline/endline cycles recorded",
        )


class RecordApprovalDriver(BaseFidelityDriver):
    """Share of submitted (non-draft) records that have been approved."""

    key = "record_approval"
    label = "Record approval rate"

    def compute(self, snapshot: NormalizedSnapshot) -> DriverResult:
        submitted = [record for record in snapshot.records if record.status != RecordStatus.DRAFT]
        if not submitted:
            return DriverResult(score=0.0, detail="No submitted records")
        approved = sum(1 for record in submitted if record.status == RecordStatus.APPROVED)
        return DriverResult(
            score=ratio_score(approved, len(submitted)),
            detail=f"{approved} of {len(submitted)} records approved",
        )


def build_driver_registry(
    *,
    observation_visits_target: int = DEFAULT_OBSERVATION_VISITS_TARGET,
) -> dict[str, BaseFidelityDriver]:
    """Every known driver keyed by its ``key``."""
    drivers: list[BaseFidelityDriver] = [
        ObservationCoverageDriver(observation_visits_target),
        TrainingCompletionDriver(),
        AssessmentCycleDriver(),
        RecordApprovalDriver(),
    ]
    return {driver.key: driver for driver in drivers}


KNOWN_DRIVERS: Final[frozenset[str]] = frozenset(build_driver_registry())
