"""
tests/test_performance_tree.py

Tree Aggregator and Eligibility Classifier.

Coverage
--------
- Parent scores are the mean of their direct children
- school_count is the sum over descendant schools
- Alphabetical child ordering at every level
- Empty input yields a zero "no data" root
- Weaning boundary at exactly 8.0 vs 7.99
- The three-school sub-county worked example
"""

from __future__ import annotations

from datetime import date

import pytest

from hierarchy.resolver import UNKNOWN_REGION, UNKNOWN_SUB_COUNTY
from hierarchy.scope import Scope
from performance import (
    NodeLevel,
    build_performance_tree,
    find_node,
    is_weaning_eligible,
    iter_nodes,
    weaning_gaps,
)
from records.types import RecordModule, ScoreCard


@pytest.fixture()
def mixed_records(make_scorecard_record, make_record):
    return [
        make_scorecard_record(8, 8, 8, 8, 8, school_id="A", school_name="Alpha", subCounty="Layibi"),
        make_scorecard_record(6, 7, 6, 5, 6, school_id="B", school_name="Bravo", subCounty="Layibi"),
        make_scorecard_record(9, 9, 9, 9, 9, school_id="C", school_name="Charlie", subCounty="Layibi"),
        make_scorecard_record(4, 4, 4, 4, 4, school_id="D", school_name="Delta", subCounty="Bardege"),
        make_scorecard_record(5, 6, 7, 8, 9, school_id="E", school_name="Echo", district="Kampala"),
        make_scorecard_record(2, 2, 2, 2, 2, school_id="F", school_name="Foxtrot", district="Atlantis"),
        # No ScoreCard: visible to other analyzers, absent from the tree.
        make_record(RecordModule.VISIT, school_id="G", school_name="Golf"),
    ]


class TestWorkedExample:
    def test_three_school_sub_county(self, make_scorecard_record) -> None:
        records = [
            make_scorecard_record(8, 8, 8, 8, 8, school_id="1", subCounty="Layibi"),
            make_scorecard_record(6, 7, 6, 5, 6, school_id="2", subCounty="Layibi"),
            make_scorecard_record(9, 9, 9, 9, 9, school_id="3", subCounty="Layibi"),
        ]
        root = build_performance_tree(records)
        sub_county = find_node(root, "subcounty-Gulu-Layibi")

        assert sub_county is not None
        assert sub_county.school_count == 3
        assert sub_county.scores.instruction == pytest.approx(7.67, abs=0.01)
        assert sub_county.scores.outcomes == pytest.approx(8.0)
        assert sub_county.scores.leadership == pytest.approx(7.67, abs=0.01)
        assert sub_county.scores.community == pytest.approx(7.33, abs=0.01)
        assert sub_county.scores.environment == pytest.approx(7.67, abs=0.01)

        # {8,8,8,8,8} sits exactly on the threshold, which counts as eligible.
        eligible = [child.id for child in sub_county.children if child.weaning_eligible]
        assert eligible == ["school-1", "school-3"]
        assert find_node(root, "school-2").weaning_eligible is False


class TestTreeStructure:
    def test_parent_scores_are_mean_of_direct_children(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)
        for node in iter_nodes(root):
            if node.level == NodeLevel.SCHOOL:
                continue
            expected = ScoreCard.mean_of([child.scores for child in node.children])
            for name, value in expected.as_dict().items():
                assert getattr(node.scores, name) == pytest.approx(value)

    def test_school_count_is_sum_of_descendant_schools(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)
        for node in iter_nodes(root):
            schools = [n for n in iter_nodes(node) if n.level == NodeLevel.SCHOOL]
            assert node.school_count == len(schools)
        assert root.school_count == 6

    def test_region_mean_is_not_school_mean(self, mixed_records) -> None:
        # Northern region holds two sub-counties of unequal size; the mean
        # is taken over children, not over the schools underneath.
        root = build_performance_tree(mixed_records)
        gulu = find_node(root, "district-Gulu")
        layibi = find_node(root, "subcounty-Gulu-Layibi")
        bardege = find_node(root, "subcounty-Gulu-Bardege")
        assert gulu.scores.instruction == pytest.approx(
            (layibi.scores.instruction + bardege.scores.instruction) / 2
        )

    def test_children_sorted_by_name_at_every_level(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)
        for node in iter_nodes(root):
            names = [child.name.casefold() for child in node.children]
            assert names == sorted(names)

    def test_unknown_district_lands_in_sentinel_bucket(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)
        unknown = find_node(root, "region-Unknown Region")
        assert unknown is not None
        assert unknown.school_count == 1
        assert unknown.children[0].name == "Atlantis"

    def test_weaning_flag_only_on_schools(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)
        for node in iter_nodes(root):
            if node.level == NodeLevel.SCHOOL:
                assert isinstance(node.weaning_eligible, bool)
            else:
                assert node.weaning_eligible is None

    def test_empty_input_is_no_data_root(self) -> None:
        root = build_performance_tree([])
        assert root.id == "country-uganda"
        assert root.name == "Uganda (National)"
        assert root.children == ()
        assert root.school_count == 0
        assert root.scores == ScoreCard.zero()
        assert root.has_data is False

    def test_scope_restricts_tree(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records, scope=Scope.parse("district", "Kampala"))
        assert root.school_count == 1
        assert [node.name for node in iter_nodes(root) if node.level == NodeLevel.SCHOOL] == ["Echo"]

    def test_school_sits_in_bucket_of_its_newest_record(self, make_scorecard_record) -> None:
        records = [
            make_scorecard_record(5, 5, 5, 5, 5, school_id="A", subCounty="Old", on=date(2024, 1, 1)),
            make_scorecard_record(6, 6, 6, 6, 6, school_id="A", subCounty="New", on=date(2025, 1, 1)),
        ]
        root = build_performance_tree(records)
        assert root.school_count == 1
        assert find_node(root, "subcounty-Gulu-New").school_count == 1
        assert find_node(root, "subcounty-Gulu-Old") is None

    def test_newer_record_without_sub_county_keeps_school_in_place(
        self, make_scorecard_record, make_record
    ) -> None:
        records = [
            make_scorecard_record(7, 7, 7, 7, 7, school_id="A", subCounty="Layibi", on=date(2025, 1, 10)),
            make_record(RecordModule.VISIT, school_id="A", on=date(2025, 2, 1)),
        ]
        root = build_performance_tree(records)

        assert find_node(root, "subcounty-Gulu-Layibi").school_count == 1
        assert find_node(root, f"subcounty-Gulu-{UNKNOWN_SUB_COUNTY}") is None
        scoped = build_performance_tree(records, scope=Scope.parse("sub_county", "Layibi"))
        assert scoped.school_count == 1

    def test_newer_record_without_district_keeps_school_in_place(
        self, make_scorecard_record, make_record
    ) -> None:
        records = [
            make_scorecard_record(7, 7, 7, 7, 7, school_id="A", subCounty="Layibi", on=date(2025, 1, 10)),
            make_record(RecordModule.TRAINING, school_id="A", district="", on=date(2025, 2, 1)),
        ]
        root = build_performance_tree(records)
        assert find_node(root, "district-Gulu").school_count == 1
        assert find_node(root, f"region-{UNKNOWN_REGION}") is None


class TestEligibility:
    def test_exactly_threshold_is_eligible(self) -> None:
        assert is_weaning_eligible(ScoreCard(8.0, 8.0, 8.0, 8.0, 8.0)) is True

    def test_one_dimension_just_below_fails(self) -> None:
        assert is_weaning_eligible(ScoreCard(9.0, 9.0, 9.0, 9.0, 7.99)) is False

    def test_gaps_list_only_failing_dimensions(self) -> None:
        gaps = weaning_gaps(ScoreCard(9.0, 7.5, 9.0, 9.0, 9.0))
        assert list(gaps) == ["outcomes"]
        assert gaps["outcomes"] == pytest.approx(0.5)

    def test_custom_threshold(self) -> None:
        assert is_weaning_eligible(ScoreCard(6, 6, 6, 6, 6), threshold=6.0) is True

    def test_school_nodes_carry_their_gaps(self, mixed_records) -> None:
        root = build_performance_tree(mixed_records)

        assert find_node(root, "school-A").weaning_gaps == {}
        assert find_node(root, "school-B").weaning_gaps == pytest.approx(
            {"instruction": 2.0, "outcomes": 1.0, "leadership": 2.0, "community": 3.0, "environment": 2.0}
        )
        assert find_node(root, "region-Northern Region").weaning_gaps is None

    def test_gaps_follow_the_configured_threshold(self, make_scorecard_record) -> None:
        root = build_performance_tree([make_scorecard_record(6, 6, 6, 6, 5.5)], weaning_threshold=6.0)
        assert find_node(root, "school-S1").weaning_gaps == {"environment": pytest.approx(0.5)}
