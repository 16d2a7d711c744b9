"""
recommendations/catalog.py

Evidence-based recommendations mapped to engine signals.

Each catalog entry carries the conditions under which it applies. An entry
applies when every condition it sets holds; unset conditions are ignored.
Matches are ordered high -> medium -> low, catalog order within a priority.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final


class RecommendationCategory:
    COACHING = "coaching"
    TRAINING = "training"
    ASSESSMENT = "assessment"
    MATERIALS = "materials"
    LEADERSHIP = "leadership"
    INTERVENTION = "intervention"
    DATA_QUALITY = "data_quality"


class Priority:
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_PRIORITY_ORDER: Final[dict[str, int]] = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

# Observation coverage (percent) at or below which coverage counts as low.
LOW_OBSERVATION_COVERAGE: Final[float] = 50.0


@dataclass(frozen=True)
class Conditions:
    fidelity_below: float | None = None
    fidelity_above: float | None = None
    domain_gain_below: float | None = None
    missing_baseline: bool = False
    missing_endline: bool = False
    low_observation: bool = False
    high_outliers: bool = False


@dataclass(frozen=True)
class Recommendation:
    id: str
    category: str
    title: str
    description: str
    actions: tuple[str, ...]
    conditions: Conditions
    priority: str


@dataclass(frozen=True)
class RecommendationSignals:
    fidelity_score: float
    domain_changes: tuple[float | None, ...] = ()
    schools_missing_baseline: int = 0
    schools_missing_endline: int = 0
    outlier_count: int = 0
    observation_coverage: float = 0.0


RECOMMENDATION_CATALOG: Final[tuple[Recommendation, ...]] = (
    Recommendation(
        id="REC-COACH-001",
        category=RecommendationCategory.COACHING,
        title="Increase coaching frequency",
        description="Schools with fewer than 2 coaching visits per term show markedly lower fidelity scores.",
        actions=(
            "Schedule at least 2 coaching visits per term",
            "Pair under-visited schools with nearby trained coaches",
            "Use the coaching checklist to structure visits",
        ),
        conditions=Conditions(fidelity_below=50),
        priority=Priority.HIGH,
    ),
    Recommendation(
        id="REC-COACH-002",
        category=RecommendationCategory.COACHING,
        title="Focus coaching on literacy block structure",
        description="Teachers run individual activities but do not follow the structured literacy block sequence.",
        actions=(
            "Model a full 45-minute literacy block during a coaching visit",
            "Provide a printed lesson sequence guide",
            "Observe and give feedback on time allocation",
        ),
        conditions=Conditions(fidelity_below=60, low_observation=True),
        priority=Priority.MEDIUM,
    ),
    Recommendation(
        id="REC-TRAIN-001",
        category=RecommendationCategory.TRAINING,
        title="Conduct refresher training on assessment",
        description="Out-of-range assessment values suggest scoring protocols are not being followed.",
        actions=(
            "Organize a 1-day refresher on assessment administration",
            "Provide standardized scoring rubrics and practice items",
            "Pair new assessors with experienced ones for calibration",
        ),
        conditions=Conditions(high_outliers=True),
        priority=Priority.HIGH,
    ),
    Recommendation(
        id="REC-ASSESS-001",
        category=RecommendationCategory.ASSESSMENT,
        title="Complete missing baseline assessments",
        description="Schools without baseline data cannot demonstrate learning gains.",
        actions=(
            "Prioritize baseline assessments in the next 4 weeks",
            "Deploy data clerks or trained volunteers",
            "Use simplified assessments for catch-up cohorts",
        ),
        conditions=Conditions(missing_baseline=True),
        priority=Priority.HIGH,
    ),
    Recommendation(
        id="REC-ASSESS-002",
        category=RecommendationCategory.ASSESSMENT,
        title="Schedule endline assessments",
        description="Schools with baselines but no endlines leave their evidence cycle incomplete.",
        actions=(
            "Schedule endline assessments for the end of term",
            "Assess the same learners at endline (use child IDs)",
            "Report results to school leaders within 2 weeks",
        ),
        conditions=Conditions(missing_endline=True),
        priority=Priority.HIGH,
    ),
    Recommendation(
        id="REC-MAT-001",
        category=RecommendationCategory.MATERIALS,
        title="Distribute decodable readers",
        description="Low phonics and decoding gains usually mean too few practice materials.",
        actions=(
            "Distribute at least 1 decodable reader per 3 learners",
            "Train teachers to use decodable readers in guided reading",
            "Set up a classroom reading corner with labeled levels",
        ),
        conditions=Conditions(domain_gain_below=5),
        priority=Priority.MEDIUM,
    ),
    Recommendation(
        id="REC-LEAD-001",
        category=RecommendationCategory.LEADERSHIP,
        title="Engage school leaders in the reading timetable",
        description="Fidelity improves when school leaders protect reading instruction time.",
        actions=(
            "Meet the head teacher to review timetable allocation",
            "Propose a minimum 30-minute daily reading block",
            "Share the reading time policy brief",
        ),
        conditions=Conditions(fidelity_below=40),
        priority=Priority.MEDIUM,
    ),
    Recommendation(
        id="REC-INTV-001",
        category=RecommendationCategory.INTERVENTION,
        title="Set up catch-up reading groups",
        description="Learners below benchmark at endline need structured remedial support.",
        actions=(
            "Identify learners scoring below 42% at endline",
            "Form small groups (max 8 learners) by skill level",
            "Assign 3 sessions a week using the catch-up curriculum",
            "Reassess after 6 weeks",
        ),
        conditions=Conditions(domain_gain_below=0),
        priority=Priority.HIGH,
    ),
    Recommendation(
        id="REC-DQ-001",
        category=RecommendationCategory.DATA_QUALITY,
        title="Resolve duplicate and out-of-range learner records",
        description="Duplicate or implausible learner entries distort sample sizes and gain calculations.",
        actions=(
            "Run the deduplication check on the learner registry",
            "Merge or flag duplicate entries",
            "Review data entry protocols with clerks",
        ),
        conditions=Conditions(high_outliers=True),
        priority=Priority.MEDIUM,
    ),
    Recommendation(
        id="REC-POS-001",
        category=RecommendationCategory.COACHING,
        title="Recognize and share best practices",
        description="Schools with strong fidelity scores demonstrate effective implementation.",
        actions=(
            "Document the school's practices as a case study",
            "Invite the school to present at the next cluster meeting",
            "Share anonymized results with government stakeholders",
        ),
        conditions=Conditions(fidelity_above=75),
        priority=Priority.LOW,
    ),
)


def applicable_recommendations(
    signals: RecommendationSignals,
    catalog: Sequence[Recommendation] = RECOMMENDATION_CATALOG,
) -> list[Recommendation]:
    """Catalog entries whose conditions all hold for *signals*, by priority."""
    matched = [rec for rec in catalog if _applies(rec.conditions, signals)]
    return sorted(matched, key=lambda rec: _PRIORITY_ORDER.get(rec.priority, len(_PRIORITY_ORDER)))


def _applies(conditions: Conditions, signals: RecommendationSignals) -> bool:
    if conditions.fidelity_below is not None and signals.fidelity_score >= conditions.fidelity_below:
        return False
    if conditions.fidelity_above is not None and signals.fidelity_score < conditions.fidelity_above:
        return False
    if conditions.missing_baseline and signals.schools_missing_baseline == 0:
        return False
    if conditions.missing_endline and signals.schools_missing_endline == 0:
        return False
    if conditions.high_outliers and signals.outlier_count == 0:
        return False
    if conditions.low_observation and signals.observation_coverage > LOW_OBSERVATION_COVERAGE:
        return False
    if conditions.domain_gain_below is not None:
        threshold = conditions.domain_gain_below
        if not any(change is not None and change < threshold for change in signals.domain_changes):
            return False
    return True
