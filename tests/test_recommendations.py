"""
tests/test_recommendations.py

Recommendation matching against engine signals.
"""

from __future__ import annotations

from recommendations import RecommendationSignals, applicable_recommendations


def _ids(signals: RecommendationSignals) -> list[str]:
    return [rec.id for rec in applicable_recommendations(signals)]


class TestApplicableRecommendations:
    def test_strong_clean_scope_gets_positive_reinforcement_only(self) -> None:
        signals = RecommendationSignals(fidelity_score=80.0, domain_changes=(12.0, 9.0), observation_coverage=100.0)
        assert _ids(signals) == ["REC-POS-001"]

    def test_low_fidelity_and_gaps(self) -> None:
        signals = RecommendationSignals(
            fidelity_score=35.0,
            domain_changes=(None, -2.0),
            schools_missing_baseline=1,
            schools_missing_endline=0,
            outlier_count=3,
            observation_coverage=25.0,
        )
        assert _ids(signals) == [
            "REC-COACH-001",
            "REC-TRAIN-001",
            "REC-ASSESS-001",
            "REC-INTV-001",
            "REC-COACH-002",
            "REC-MAT-001",
            "REC-LEAD-001",
            "REC-DQ-001",
        ]

    def test_sorted_by_priority(self) -> None:
        signals = RecommendationSignals(fidelity_score=10.0, domain_changes=(1.0,), observation_coverage=0.0)
        priorities = [rec.priority for rec in applicable_recommendations(signals)]
        order = {"high": 0, "medium": 1, "low": 2}
        assert priorities == sorted(priorities, key=order.__getitem__)

    def test_good_observation_coverage_suppresses_coaching_focus(self) -> None:
        signals = RecommendationSignals(fidelity_score=55.0, observation_coverage=75.0)
        assert "REC-COACH-002" not in _ids(signals)
        signals = RecommendationSignals(fidelity_score=55.0, observation_coverage=50.0)
        assert "REC-COACH-002" in _ids(signals)

    def test_null_changes_never_trigger_gain_conditions(self) -> None:
        signals = RecommendationSignals(fidelity_score=60.0, domain_changes=(None, None), observation_coverage=100.0)
        assert _ids(signals) == []
