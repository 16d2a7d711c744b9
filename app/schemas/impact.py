"""
app/schemas/impact.py

Response schemas for impact engine endpoints.

Ratios and averages that cannot be computed stay ``null``; they are never
serialized as 0 or NaN. Floats are rounded for presentation only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.services.impact_engine import ImpactReport
from cost import CostEffectivenessData
from fidelity import FidelityDashboardData, FidelityScore
from gains import LearningGainsData
from performance import PerformanceNode
from quality import DataQualitySummary
from recommendations import Recommendation
from records.types import ScoreCard


def _round(value: float | None, digits: int = 2) -> float | None:
    return None if value is None else round(value, digits)


class _ResponseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------------
# Performance tree
# ---------------------------------------------------------------------------


class ScoreCardResponse(_ResponseModel):
    instruction: float = Field(..., ge=0, le=10)
    outcomes: float = Field(..., ge=0, le=10)
    leadership: float = Field(..., ge=0, le=10)
    community: float = Field(..., ge=0, le=10)
    environment: float = Field(..., ge=0, le=10)

    @classmethod
    def from_scorecard(cls, scorecard: ScoreCard) -> "ScoreCardResponse":
        return cls(**{name: round(value, 2) for name, value in scorecard.as_dict().items()})


class PerformanceNodeResponse(_ResponseModel):
    id: str
    name: str
    level: str
    scores: ScoreCardResponse
    school_count: int = Field(..., ge=0)
    has_data: bool
    weaning_eligible: bool | None = None
    weaning_gaps: dict[str, float] | None = None
    children: list[PerformanceNodeResponse] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: PerformanceNode) -> "PerformanceNodeResponse":
        return cls(
            id=node.id,
            name=node.name,
            level=node.level,
            scores=ScoreCardResponse.from_scorecard(node.scores),
            school_count=node.school_count,
            has_data=node.has_data,
            weaning_eligible=node.weaning_eligible,
            weaning_gaps=(
                None
                if node.weaning_gaps is None
                else {name: round(gap, 2) for name, gap in node.weaning_gaps.items()}
            ),
            children=[cls.from_node(child) for child in node.children],
        )


PerformanceNodeResponse.model_rebuild()


# ---------------------------------------------------------------------------
# Fidelity
# ---------------------------------------------------------------------------


class FidelityDriverResponse(_ResponseModel):
    driver: str
    label: str
    score: float = Field(..., ge=0, le=100)
    weight: float = Field(..., ge=0)
    detail: str


class FidelityScoreResponse(_ResponseModel):
    scope_type: str
    scope_id: str
    scope_name: str
    total_score: float = Field(..., ge=0, le=100)
    band: Literal["Strong", "Developing", "Needs support", "High priority"]
    drivers: list[FidelityDriverResponse]
    sample_size: int = Field(..., ge=0)
    period: str | None = None

    @classmethod
    def from_score(cls, score: FidelityScore) -> "FidelityScoreResponse":
        return cls(
            scope_type=score.scope_type,
            scope_id=score.scope_id,
            scope_name=score.scope_name,
            total_score=score.total_score,
            band=score.band,
            drivers=[
                FidelityDriverResponse(
                    driver=driver.driver,
                    label=driver.label,
                    score=driver.score,
                    weight=driver.weight,
                    detail=driver.detail,
                )
                for driver in score.drivers
            ],
            sample_size=score.sample_size,
            period=score.period,
        )


class FidelityRankingResponse(_ResponseModel):
    name: str
    score: float
    band: str


class FidelityDashboardResponse(_ResponseModel):
    scope: FidelityScoreResponse
    children: list[FidelityScoreResponse]
    rankings: list[FidelityRankingResponse]

    @classmethod
    def from_dashboard(cls, dashboard: FidelityDashboardData) -> "FidelityDashboardResponse":
        return cls(
            scope=FidelityScoreResponse.from_score(dashboard.scope),
            children=[FidelityScoreResponse.from_score(child) for child in dashboard.children],
            rankings=[
                FidelityRankingResponse(name=item.name, score=item.score, band=item.band)
                for item in dashboard.rankings
            ],
        )


# ---------------------------------------------------------------------------
# Learning gains
# ---------------------------------------------------------------------------


class LearningDomainGainResponse(_ResponseModel):
    domain: str
    label: str
    baseline_avg: float | None
    endline_avg: float | None
    change: float | None
    sample_size: int = Field(..., ge=0)
    baseline_count: int = Field(..., ge=0)
    endline_count: int = Field(..., ge=0)
    status: Literal["ok", "insufficient data"]
    below_benchmark_pct: float | None = None
    approaching_pct: float | None = None
    at_benchmark_pct: float | None = None


class LearningGainsResponse(_ResponseModel):
    period: str | None
    domains: list[LearningDomainGainResponse]
    school_improvement_index: float | None

    @classmethod
    def from_gains(cls, gains: LearningGainsData) -> "LearningGainsResponse":
        return cls(
            period=gains.period,
            domains=[
                LearningDomainGainResponse(
                    domain=gain.domain,
                    label=gain.label,
                    baseline_avg=_round(gain.baseline_avg, 1),
                    endline_avg=_round(gain.endline_avg, 1),
                    change=_round(gain.change, 1),
                    sample_size=gain.sample_size,
                    baseline_count=gain.baseline_count,
                    endline_count=gain.endline_count,
                    status=gain.status,
                    below_benchmark_pct=gain.below_benchmark_pct,
                    approaching_pct=gain.approaching_pct,
                    at_benchmark_pct=gain.at_benchmark_pct,
                )
                for gain in gains.domains
            ],
            school_improvement_index=_round(gains.school_improvement_index, 1),
        )


# ---------------------------------------------------------------------------
# Cost effectiveness
# ---------------------------------------------------------------------------


class CostBreakdownItemResponse(_ResponseModel):
    category: str
    amount: float


class CostEffectivenessResponse(_ResponseModel):
    total_cost: float
    cost_per_school: float | None
    cost_per_teacher: float | None
    cost_per_learner_assessed: float | None
    cost_per_learner_improved: float | None
    breakdown: list[CostBreakdownItemResponse]
    period: str | None
    schools_supported: int = Field(..., ge=0)
    teachers_trained: int = Field(..., ge=0)
    learners_assessed: int = Field(..., ge=0)
    learners_improved: int = Field(..., ge=0)

    @classmethod
    def from_cost(cls, cost: CostEffectivenessData) -> "CostEffectivenessResponse":
        return cls(
            total_cost=cost.total_cost,
            cost_per_school=cost.cost_per_school,
            cost_per_teacher=cost.cost_per_teacher,
            cost_per_learner_assessed=cost.cost_per_learner_assessed,
            cost_per_learner_improved=cost.cost_per_learner_improved,
            breakdown=[
                CostBreakdownItemResponse(category=item.category, amount=item.amount)
                for item in cost.breakdown
            ],
            period=cost.period,
            schools_supported=cost.coverage.schools_supported,
            teachers_trained=cost.coverage.teachers_trained,
            learners_assessed=cost.coverage.learners_assessed,
            learners_improved=cost.coverage.learners_improved,
        )


# ---------------------------------------------------------------------------
# Data quality
# ---------------------------------------------------------------------------


class OutlierFlagResponse(_ResponseModel):
    record_id: int
    field: str
    value: float


class DataQualityResponse(_ResponseModel):
    completeness_score: float = Field(..., ge=0, le=100)
    schools_missing_baseline: int = Field(..., ge=0)
    schools_missing_endline: int = Field(..., ge=0)
    outlier_count: int = Field(..., ge=0)
    duplicate_learners_detected: int = Field(..., ge=0)
    duplicate_teachers_detected: int = Field(..., ge=0)
    outliers: list[OutlierFlagResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: DataQualitySummary) -> "DataQualityResponse":
        return cls(
            completeness_score=summary.completeness_score,
            schools_missing_baseline=summary.schools_missing_baseline,
            schools_missing_endline=summary.schools_missing_endline,
            outlier_count=summary.outlier_count,
            duplicate_learners_detected=summary.duplicate_learners_detected,
            duplicate_teachers_detected=summary.duplicate_teachers_detected,
            outliers=[
                OutlierFlagResponse(record_id=flag.record_id, field=flag.field, value=flag.value)
                for flag in summary.outliers
            ],
        )


# ---------------------------------------------------------------------------
# Full report
# ---------------------------------------------------------------------------


class RecommendationResponse(_ResponseModel):
    id: str
    category: str
    title: str
    description: str
    actions: list[str]
    priority: Literal["high", "medium", "low"]

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> "RecommendationResponse":
        return cls(
            id=rec.id,
            category=rec.category,
            title=rec.title,
            description=rec.description,
            actions=list(rec.actions),
            priority=rec.priority,
        )


class ImpactReportResponse(_ResponseModel):
    scope_type: str
    scope_id: str
    period: str | None
    generated_at: datetime
    performance: PerformanceNodeResponse
    fidelity: FidelityDashboardResponse
    learning_gains: LearningGainsResponse
    cost_effectiveness: CostEffectivenessResponse
    data_quality: DataQualityResponse
    recommendations: list[RecommendationResponse]

    @classmethod
    def from_report(cls, report: ImpactReport) -> "ImpactReportResponse":
        return cls(
            scope_type=report.scope.level,
            scope_id=report.scope.identifier,
            period=report.period,
            generated_at=report.generated_at,
            performance=PerformanceNodeResponse.from_node(report.performance),
            fidelity=FidelityDashboardResponse.from_dashboard(report.fidelity),
            learning_gains=LearningGainsResponse.from_gains(report.learning_gains),
            cost_effectiveness=CostEffectivenessResponse.from_cost(report.cost_effectiveness),
            data_quality=DataQualityResponse.from_summary(report.data_quality),
            recommendations=[
                RecommendationResponse.from_recommendation(rec) for rec in report.recommendations
            ],
        )


class HealthResponse(_ResponseModel):
    status: Literal["ok"] = "ok"
    service: str
