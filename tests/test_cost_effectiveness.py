"""
tests/test_cost_effectiveness.py

Cost-Effectiveness Calculator: ratio formulas, null denominators, scope
and period matching of cost entries, and coverage counts.
"""

from __future__ import annotations

import pytest

from cost import calculate_cost_effectiveness
from hierarchy.scope import Scope
from records.types import CostEntry, RecordModule


def _entry(amount: float, category: str = "transport", scope_type: str = "country",
           scope_value: str = "", period: str = "2025-T1") -> CostEntry:
    return CostEntry(category, amount, scope_type, scope_value, period)


@pytest.fixture()
def programme_records(make_record):
    return [
        # Two schools in Gulu, one in Kampala.
        make_record(RecordModule.VISIT, school_id="A", district="Gulu"),
        make_record(RecordModule.VISIT, school_id="B", district="Gulu"),
        make_record(RecordModule.VISIT, school_id="K", district="Kampala"),
        # Trainings: attendance from numberAttended, else participants.
        make_record(RecordModule.TRAINING, school_id="A", trainingStatus="Completed", numberAttended=4),
        make_record(RecordModule.TRAINING, school_id="B", trainingStatus="Completed", participants=["Ann", "Bob"]),
        make_record(RecordModule.TRAINING, school_id="B", trainingStatus="Scheduled", numberAttended=9),
        # Learners: ann improves, ben does not, cara has baseline only.
        make_record(school_id="A", childName="Ann", assessmentType="baseline", letterIdentificationScore=20),
        make_record(school_id="A", childName="ann ", assessmentType="endline", letterIdentificationScore=50),
        make_record(school_id="A", childName="Ben", assessmentType="baseline", letterIdentificationScore=60),
        make_record(school_id="A", childName="Ben", assessmentType="endline", letterIdentificationScore=55),
        make_record(school_id="B", childName="Cara", assessmentType="baseline", letterIdentificationScore=30),
    ]


class TestRatios:
    def test_zero_schools_gives_null_ratio(self) -> None:
        result = calculate_cost_effectiveness([], [_entry(5000.0)])
        assert result.total_cost == pytest.approx(5000.0)
        assert result.cost_per_school is None
        assert result.cost_per_teacher is None
        assert result.cost_per_learner_assessed is None
        assert result.cost_per_learner_improved is None

    def test_ratios_for_district(self, programme_records) -> None:
        entries = [
            _entry(600.0, "transport", "district", "Gulu"),
            _entry(300.0, "meals", "school", "A"),
        ]
        result = calculate_cost_effectiveness(
            programme_records, entries, scope=Scope.parse("district", "Gulu")
        )

        assert result.total_cost == pytest.approx(900.0)
        assert result.coverage.schools_supported == 2
        assert result.coverage.teachers_trained == 6
        assert result.coverage.learners_assessed == 3
        assert result.coverage.learners_improved == 1
        assert result.cost_per_school == pytest.approx(450.0)
        assert result.cost_per_teacher == pytest.approx(150.0)
        assert result.cost_per_learner_assessed == pytest.approx(300.0)
        assert result.cost_per_learner_improved == pytest.approx(900.0)

    def test_ratios_are_rounded(self, make_record) -> None:
        records = [make_record(RecordModule.VISIT, school_id=s) for s in ("A", "B", "C")]
        result = calculate_cost_effectiveness(records, [_entry(100.0)])
        assert result.cost_per_school == 33.33

    def test_breakdown_lists_non_zero_categories_in_order(self) -> None:
        entries = [_entry(5.0, "other"), _entry(10.0, "meals"), _entry(1.0, "transport")]
        result = calculate_cost_effectiveness([], entries)
        assert [(item.category, item.amount) for item in result.breakdown] == [
            ("transport", 1.0),
            ("meals", 10.0),
            ("other", 5.0),
        ]


class TestEntryMatching:
    def test_wider_scope_entries_are_excluded(self, programme_records) -> None:
        entries = [_entry(1000.0), _entry(200.0, scope_type="district", scope_value="gulu")]
        result = calculate_cost_effectiveness(
            programme_records, entries, scope=Scope.parse("district", "Gulu")
        )
        assert result.total_cost == pytest.approx(200.0)

    def test_country_scope_includes_everything_inside(self, programme_records) -> None:
        entries = [
            _entry(1000.0),
            _entry(200.0, scope_type="region", scope_value="Northern Region"),
            _entry(50.0, scope_type="district", scope_value="Kampala"),
            _entry(25.0, scope_type="school", scope_value="K"),
        ]
        result = calculate_cost_effectiveness(programme_records, entries)
        assert result.total_cost == pytest.approx(1275.0)

    def test_entries_outside_scope_are_excluded(self, programme_records) -> None:
        entries = [
            _entry(50.0, scope_type="district", scope_value="Kampala"),
            _entry(25.0, scope_type="school", scope_value="K"),
            _entry(10.0, scope_type="region", scope_value="Northern Region"),
        ]
        result = calculate_cost_effectiveness(
            programme_records, entries, scope=Scope.parse("region", "Northern Region")
        )
        assert result.total_cost == pytest.approx(10.0)

    def test_period_filter(self, programme_records) -> None:
        entries = [_entry(100.0, period="2025-T1"), _entry(999.0, period="2024-T3")]
        result = calculate_cost_effectiveness(programme_records, entries, period="2025-t1")
        assert result.total_cost == pytest.approx(100.0)
        assert result.period == "2025-t1"

    def test_no_period_includes_all(self, programme_records) -> None:
        entries = [_entry(100.0, period="2025-T1"), _entry(999.0, period="2024-T3")]
        result = calculate_cost_effectiveness(programme_records, entries)
        assert result.total_cost == pytest.approx(1099.0)

    def test_unusable_entry_scope_is_skipped(self, programme_records) -> None:
        entries = [_entry(100.0, scope_type="parish", scope_value="X"), _entry(1.0)]
        result = calculate_cost_effectiveness(programme_records, entries)
        assert result.total_cost == pytest.approx(1.0)
