"""
tests/test_impact_engine.py

ImpactEngine: single-analyzer entry points, the parallel full report and
analyzer failure handling.
"""

from __future__ import annotations

import pytest

from app.config import EngineSettings
from app.services import impact_engine as impact_engine_module
from app.services.impact_engine import ImpactEngine, ImpactEngineError
from hierarchy.scope import Scope
from records.types import CostEntry, RecordModule, RecordStatus


@pytest.fixture()
def engine() -> ImpactEngine:
    return ImpactEngine(EngineSettings())


@pytest.fixture()
def gulu_scope() -> Scope:
    return Scope.parse("district", "Gulu")


@pytest.fixture()
def programme_records(make_record):
    return [
        make_record(RecordModule.VISIT, school_id="A", school_name="Alpha", subCounty="Layibi"),
        make_record(RecordModule.VISIT, school_id="A", school_name="Alpha", subCounty="Layibi"),
        make_record(school_id="A", school_name="Alpha", subCounty="Layibi", assessmentType="baseline"),
        make_record(school_id="A", school_name="Alpha", subCounty="Layibi", assessmentType="endline"),
        make_record(
            RecordModule.VISIT,
            school_id="B",
            school_name="Bravo",
            subCounty="Bardege",
            status=RecordStatus.DRAFT,
        ),
        make_record(school_id="B", school_name="Bravo", subCounty="Bardege", assessmentType="baseline"),
        make_record(RecordModule.TRAINING, school_id=None, trainingStatus="Completed", numberAttended=5),
        make_record(RecordModule.TRAINING, school_id=None, trainingStatus="Completed", numberAttended=3),
        make_record(RecordModule.TRAINING, school_id=None, trainingStatus="Scheduled"),
        make_record(school_id="K", school_name="Kilo", district="Kampala", assessmentType="baseline"),
    ]


class TestSingleAnalyzers:
    def test_scope_restricts_every_analyzer(self, engine, gulu_scope, programme_records) -> None:
        tree = engine.performance(gulu_scope, programme_records)
        quality = engine.data_quality(gulu_scope, programme_records)

        assert tree.school_count == 0
        assert quality.schools_missing_baseline == 0
        assert quality.schools_missing_endline == 1

    def test_cost_effectiveness_uses_period(self, engine, gulu_scope, programme_records) -> None:
        entries = [
            CostEntry("transport", 800.0, "district", "Gulu", "2025-T1"),
            CostEntry("transport", 999.0, "district", "Gulu", "2024-T3"),
        ]
        result = engine.cost_effectiveness(gulu_scope, programme_records, entries, period="2025-T1")

        assert result.total_cost == pytest.approx(800.0)
        assert result.cost_per_school == pytest.approx(400.0)
        assert result.cost_per_teacher == pytest.approx(100.0)


class TestRun:
    def test_report_matches_single_analyzers(self, engine, gulu_scope, programme_records) -> None:
        report = engine.run(gulu_scope, programme_records, period="2025-T1")

        assert report.scope == gulu_scope
        assert report.period == "2025-T1"
        assert report.fidelity == engine.fidelity(gulu_scope, programme_records, period="2025-T1")
        assert report.data_quality == engine.data_quality(gulu_scope, programme_records)
        assert report.learning_gains == engine.learning_gains(gulu_scope, programme_records, period="2025-T1")
        assert report.cost_effectiveness.total_cost == 0.0
        # Zero cost over two schools is a real ratio, not missing data.
        assert report.cost_effectiveness.cost_per_school == 0.0
        assert report.generated_at.tzinfo is not None

    def test_recommendations_follow_signals(self, engine, gulu_scope, programme_records) -> None:
        report = engine.run(gulu_scope, programme_records)

        # Observation 50, training 66.7, assessment cycles 75: Developing.
        assert report.fidelity.scope.total_score == pytest.approx(63.9)
        assert [rec.id for rec in report.recommendations] == ["REC-ASSESS-002"]

    def test_single_worker_gives_same_report(self, gulu_scope, programme_records) -> None:
        serial = ImpactEngine(EngineSettings(max_workers=1)).run(gulu_scope, programme_records)
        parallel = ImpactEngine(EngineSettings(max_workers=5)).run(gulu_scope, programme_records)
        assert serial.fidelity == parallel.fidelity
        assert serial.data_quality == parallel.data_quality
        assert serial.recommendations == parallel.recommendations

    def test_empty_scope_degrades_without_raising(self, engine) -> None:
        report = engine.run(Scope.parse("district", "Kitgum"), [])

        assert report.performance.school_count == 0
        assert report.fidelity.scope.total_score == 0.0
        assert report.learning_gains.school_improvement_index is None
        assert report.data_quality.completeness_score == 0.0

    def test_analyzer_failure_raises_engine_error(
        self, engine, gulu_scope, programme_records, monkeypatch
    ) -> None:
        def _boom(*args, **kwargs):
            raise ValueError("bad snapshot")

        monkeypatch.setattr(impact_engine_module, "gains_from_snapshot", _boom)

        with pytest.raises(ImpactEngineError, match="learning_gains") as excinfo:
            engine.run(gulu_scope, programme_records)
        assert isinstance(excinfo.value.__cause__, ValueError)
