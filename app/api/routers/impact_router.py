"""
app/api/routers/impact_router.py

Impact engine HTTP endpoints.

Every endpoint reads one scope's records from the record store and runs
the engine over them; nothing is persisted. Missing data never fails a
request: it comes back as null fields and "insufficient data" states.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import enforce_rate_limit, get_record_repository, get_scope
from app.schemas.impact import (
    CostEffectivenessResponse,
    DataQualityResponse,
    FidelityDashboardResponse,
    ImpactReportResponse,
    LearningGainsResponse,
    PerformanceNodeResponse,
)
from app.services.impact_engine import ImpactEngine, ImpactEngineError, get_impact_engine
from db.repositories.errors import RecordStoreUnavailableError
from db.repositories.record_repository import RecordRepository
from hierarchy.scope import Scope
from records.types import CostEntry, RawRecord

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/impact",
    tags=["impact"],
    dependencies=[Depends(enforce_rate_limit)],
)


# ---------------------------------------------------------------------------
# Record store helpers
# ---------------------------------------------------------------------------


def _fetch_records(
    repository: RecordRepository,
    scope: Scope,
    date_from: date | None,
    date_to: date | None,
) -> list[RawRecord]:
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from must be on or before date_to.",
        )
    try:
        return repository.fetch_records(scope, date_from=date_from, date_to=date_to)
    except RecordStoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable.",
        ) from exc


def _fetch_cost_entries(repository: RecordRepository, period: str | None) -> list[CostEntry]:
    try:
        return repository.fetch_cost_entries(period)
    except RecordStoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable.",
        ) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/performance", response_model=PerformanceNodeResponse)
def get_performance(
    scope: Scope = Depends(get_scope),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> PerformanceNodeResponse:
    """
    Hierarchical scorecard tree (Country -> Region -> District -> Sub-County -> School).
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    return PerformanceNodeResponse.from_node(engine.performance(scope, records))


@router.get("/fidelity", response_model=FidelityDashboardResponse)
def get_fidelity(
    scope: Scope = Depends(get_scope),
    period: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> FidelityDashboardResponse:
    """
    Composite fidelity score for the scope, its children and their ranking.
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    return FidelityDashboardResponse.from_dashboard(engine.fidelity(scope, records, period=period))


@router.get("/learning-gains", response_model=LearningGainsResponse)
def get_learning_gains(
    scope: Scope = Depends(get_scope),
    period: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> LearningGainsResponse:
    """
    Baseline to endline change per learning domain and the Improvement Index.
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    return LearningGainsResponse.from_gains(engine.learning_gains(scope, records, period=period))


@router.get("/cost-effectiveness", response_model=CostEffectivenessResponse)
def get_cost_effectiveness(
    scope: Scope = Depends(get_scope),
    period: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> CostEffectivenessResponse:
    """
    Cost totals and per-unit ratios; a ratio with no denominator is null.
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    cost_entries = _fetch_cost_entries(repository, period)
    return CostEffectivenessResponse.from_cost(
        engine.cost_effectiveness(scope, records, cost_entries, period=period)
    )


@router.get("/data-quality", response_model=DataQualityResponse)
def get_data_quality(
    scope: Scope = Depends(get_scope),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> DataQualityResponse:
    """
    Completeness, outlier and duplicate diagnostics for the scope.
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    return DataQualityResponse.from_summary(engine.data_quality(scope, records))


@router.get("/report", response_model=ImpactReportResponse)
def get_report(
    scope: Scope = Depends(get_scope),
    period: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    repository: RecordRepository = Depends(get_record_repository),
    engine: ImpactEngine = Depends(get_impact_engine),
) -> ImpactReportResponse:
    """
    Every analyzer for the scope in one response, plus matching recommendations.
    """

    records = _fetch_records(repository, scope, date_from, date_to)
    cost_entries = _fetch_cost_entries(repository, period)
    try:
        report = engine.run(scope, records, cost_entries=cost_entries, period=period)
    except ImpactEngineError as exc:
        logger.error("Impact report failed scope=%s:%s: %s", scope.level, scope.identifier, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Impact computation failed.",
        ) from exc
    return ImpactReportResponse.from_report(report)
