"""
tests/test_impact_router.py

HTTP surface: scope validation, record store failures, rate limiting and
response shapes. The record repository is replaced with an in-memory fake;
the lifespan (database check) is not entered.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import CLIENT_ID_HEADER, get_record_repository
from app.config import EngineSettings
from app.main import create_app
from app.rate_limiter import FixedWindowRateLimiter
from app.services.impact_engine import ImpactEngine, ImpactEngineError, get_impact_engine
from db.repositories.errors import RecordStoreUnavailableError
from records.types import CostEntry, RecordModule


class FakeRepository:
    def __init__(self, records=(), cost_entries=(), *, fail: bool = False) -> None:
        self.records = list(records)
        self.cost_entries = list(cost_entries)
        self.fail = fail
        self.calls: list[tuple] = []

    def fetch_records(self, scope, *, date_from=None, date_to=None):
        self.calls.append((scope, date_from, date_to))
        if self.fail:
            raise RecordStoreUnavailableError("connection refused")
        return list(self.records)

    def fetch_cost_entries(self, period=None):
        if self.fail:
            raise RecordStoreUnavailableError("connection refused")
        return list(self.cost_entries)


class FailingEngine(ImpactEngine):
    def run(self, scope, records, *, cost_entries=(), period=None):
        raise ImpactEngineError("Analyzer failure: performance")


@pytest.fixture()
def records(make_record):
    return [
        make_record(
            school_id="A",
            school_name="Alpha",
            subCounty="Layibi",
            assessmentType="baseline",
            letterIdentificationScore=30,
            childId="L1",
            score_instruction=8,
            score_outcomes=8,
            score_leadership=8,
            score_community=8,
            score_environment=8,
        ),
        make_record(
            school_id="A",
            school_name="Alpha",
            subCounty="Layibi",
            assessmentType="endline",
            letterIdentificationScore=55,
            childId="L1",
            on=date(2025, 6, 1),
        ),
        make_record(RecordModule.VISIT, school_id="A", school_name="Alpha", subCounty="Layibi"),
    ]


@pytest.fixture()
def repository(records) -> FakeRepository:
    return FakeRepository(records, [CostEntry("printing", 300.0, "district", "Gulu", "2025-T1")])


@pytest.fixture()
def make_client():
    def _make(repository, *, engine=None, max_requests: int = 100) -> TestClient:
        limiter = FixedWindowRateLimiter(
            max_requests=max_requests,
            window_seconds=60.0,
            clock=lambda: 0.0,
        )
        app = create_app(rate_limiter=limiter)
        app.dependency_overrides[get_record_repository] = lambda: repository
        app.dependency_overrides[get_impact_engine] = lambda: engine or ImpactEngine(EngineSettings())
        return TestClient(app)

    return _make


@pytest.fixture()
def client(make_client, repository) -> TestClient:
    return make_client(repository)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "literacy-impact-engine"}


class TestRequestValidation:
    def test_unknown_scope_level_is_400(self, client: TestClient) -> None:
        response = client.get("/impact/performance", params={"scope_type": "parish", "scope_id": "X"})
        assert response.status_code == 400
        assert "parish" in response.json()["detail"]

    def test_missing_scope_identifier_is_400(self, client: TestClient) -> None:
        response = client.get("/impact/fidelity", params={"scope_type": "district"})
        assert response.status_code == 400

    def test_inverted_date_range_is_400(self, client: TestClient) -> None:
        response = client.get(
            "/impact/data-quality",
            params={"date_from": "2025-06-01", "date_to": "2025-01-01"},
        )
        assert response.status_code == 400

    def test_date_range_is_passed_to_the_record_store(self, client: TestClient, repository) -> None:
        client.get(
            "/impact/data-quality",
            params={"date_from": "2025-01-01", "date_to": "2025-06-30"},
        )
        _, date_from, date_to = repository.calls[-1]
        assert (date_from, date_to) == (date(2025, 1, 1), date(2025, 6, 30))

    def test_record_store_down_is_503(self, make_client) -> None:
        client = make_client(FakeRepository(fail=True))
        assert client.get("/impact/learning-gains").status_code == 503
        assert client.get("/impact/cost-effectiveness").status_code == 503


class TestRateLimiting:
    def test_over_limit_is_429_with_retry_after(self, make_client, repository) -> None:
        client = make_client(repository, max_requests=2)
        assert client.get("/impact/data-quality").status_code == 200
        assert client.get("/impact/data-quality").status_code == 200

        response = client.get("/impact/data-quality")
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"

    def test_limit_is_per_client(self, make_client, repository) -> None:
        client = make_client(repository, max_requests=1)
        assert client.get("/impact/data-quality", headers={CLIENT_ID_HEADER: "a"}).status_code == 200
        assert client.get("/impact/data-quality", headers={CLIENT_ID_HEADER: "a"}).status_code == 429
        assert client.get("/impact/data-quality", headers={CLIENT_ID_HEADER: "b"}).status_code == 200

    def test_health_is_not_limited(self, make_client, repository) -> None:
        client = make_client(repository, max_requests=1)
        client.get("/impact/data-quality")
        assert client.get("/health").status_code == 200


class TestResponses:
    def test_performance_tree(self, client: TestClient) -> None:
        body = client.get("/impact/performance").json()

        assert body["level"] == "Country"
        assert body["school_count"] == 1
        region = body["children"][0]
        assert region["name"] == "Northern Region"
        school = region["children"][0]["children"][0]["children"][0]
        assert school["name"] == "Alpha"
        assert school["weaning_eligible"] is True
        assert school["weaning_gaps"] == {}
        assert body["weaning_gaps"] is None

    def test_fidelity_dashboard(self, client: TestClient) -> None:
        body = client.get("/impact/fidelity", params={"scope_type": "district", "scope_id": "gulu"}).json()

        assert body["scope"]["scope_type"] == "district"
        assert [driver["driver"] for driver in body["scope"]["drivers"]] == [
            "observation_coverage",
            "training_completion",
            "assessment_cycle_completeness",
        ]
        assert [ranking["name"] for ranking in body["rankings"]] == ["Layibi"]

    def test_learning_gains(self, client: TestClient) -> None:
        body = client.get("/impact/learning-gains", params={"period": "2025-T1"}).json()

        letters = body["domains"][0]
        assert letters["domain"] == "letter_identification"
        assert letters["change"] == pytest.approx(25.0)
        assert letters["status"] == "ok"
        assert body["domains"][1]["change"] is None
        assert body["domains"][1]["status"] == "insufficient data"
        assert body["school_improvement_index"] == pytest.approx(25.0)

    def test_cost_ratios_without_denominator_are_null(self, client: TestClient) -> None:
        body = client.get("/impact/cost-effectiveness", params={"period": "2025-T1"}).json()

        assert body["total_cost"] == pytest.approx(300.0)
        assert body["cost_per_school"] == pytest.approx(300.0)
        assert body["cost_per_teacher"] is None
        assert body["cost_per_learner_assessed"] == pytest.approx(300.0)
        assert body["cost_per_learner_improved"] == pytest.approx(300.0)

    def test_report(self, client: TestClient) -> None:
        response = client.get(
            "/impact/report",
            params={"scope_type": "district", "scope_id": "Gulu", "period": "2025-T1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["scope_type"] == "district"
        assert body["scope_id"] == "Gulu"
        assert body["period"] == "2025-T1"
        assert body["data_quality"]["schools_missing_baseline"] == 0
        assert body["cost_effectiveness"]["total_cost"] == pytest.approx(300.0)
        assert isinstance(body["recommendations"], list)

    def test_report_engine_failure_is_500(self, make_client, repository) -> None:
        client = make_client(repository, engine=FailingEngine(EngineSettings()))
        response = client.get("/impact/report")
        assert response.status_code == 500
        assert response.json()["detail"] == "Impact computation failed."
