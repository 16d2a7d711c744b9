"""
tests/test_hierarchy.py

Hierarchy Resolver and Scope selection.
"""

from __future__ import annotations

import pytest

from hierarchy import (
    UNKNOWN_DISTRICT,
    UNKNOWN_REGION,
    UNKNOWN_SUB_COUNTY,
    InvalidScopeError,
    Scope,
    ScopeLevel,
    merge_paths,
    resolve_path,
    resolve_region,
)


class TestResolveRegion:
    @pytest.mark.parametrize(
        ("district", "region"),
        [
            ("Gulu", "Northern Region"),
            ("  kampala ", "Central Region"),
            ("MBARARA", "Western Region"),
            ("Jinja", "Eastern Region"),
        ],
    )
    def test_known_districts(self, district: str, region: str) -> None:
        assert resolve_region(district) == region

    @pytest.mark.parametrize("district", ["Atlantis", "", None])
    def test_unknown_districts_use_sentinel(self, district) -> None:
        assert resolve_region(district) == UNKNOWN_REGION


class TestResolvePath:
    def test_full_chain(self, make_record) -> None:
        record = make_record(school_id="7", school_name="Hill PS", district="gulu", subCounty="Bar-Dege")
        path = resolve_path(record)
        assert path.country == "Uganda"
        assert path.region == "Northern Region"
        assert path.district == "Gulu"
        assert path.sub_county == "Bar-Dege"
        assert path.school_id == "7"
        assert path.school_name == "Hill PS"

    def test_missing_levels_resolve_to_sentinels(self, make_record) -> None:
        path = resolve_path(make_record(district="  "))
        assert path.district == UNKNOWN_DISTRICT
        assert path.region == UNKNOWN_REGION
        assert path.sub_county == UNKNOWN_SUB_COUNTY

    def test_snake_case_sub_county_key(self, make_record) -> None:
        assert resolve_path(make_record(sub_county="Layibi")).sub_county == "Layibi"


class TestScope:
    def test_parse_accepts_aliases(self) -> None:
        assert Scope.parse("Sub-County", "Layibi") == Scope(ScopeLevel.SUB_COUNTY, "Layibi")
        assert Scope.parse("national").level == ScopeLevel.COUNTRY

    def test_country_scope_needs_no_identifier(self) -> None:
        assert Scope.parse("country") == Scope.country()

    @pytest.mark.parametrize("level", ["parish", "", None])
    def test_unknown_level_is_rejected(self, level) -> None:
        with pytest.raises(InvalidScopeError):
            Scope.parse(level, "x")

    def test_non_country_scope_requires_identifier(self) -> None:
        with pytest.raises(InvalidScopeError):
            Scope.parse("district", "  ")

    def test_contains_is_case_insensitive(self, make_record) -> None:
        path = resolve_path(make_record(school_id="7", school_name="Hill PS", subCounty="Layibi"))
        assert Scope.parse("district", "GULU").contains(path)
        assert Scope.parse("sub_county", "layibi").contains(path)
        assert Scope.parse("school", "7").contains(path)
        assert Scope.parse("school", "hill ps").contains(path)
        assert not Scope.parse("region", "Central Region").contains(path)

    def test_qualified_sub_county_separates_districts(self, make_record) -> None:
        gulu = resolve_path(make_record(subCounty="Central"))
        kampala = resolve_path(make_record(district="Kampala", subCounty="Central"))

        bare = Scope.parse("sub_county", "Central")
        assert bare.contains(gulu) and bare.contains(kampala)

        qualified = Scope.parse("sub_county", "gulu / central")
        assert qualified.contains(gulu)
        assert not qualified.contains(kampala)

    def test_child_level(self) -> None:
        assert Scope.country().child_level() == ScopeLevel.REGION
        assert Scope.parse("sub_county", "Layibi").child_level() == ScopeLevel.SCHOOL
        assert Scope.parse("school", "7").child_level() is None


class TestMergePaths:
    def test_newer_known_levels_win(self, make_record) -> None:
        newer = resolve_path(make_record(subCounty="Bardege"))
        older = resolve_path(make_record(subCounty="Layibi"))
        assert merge_paths(newer, older).sub_county == "Bardege"

    def test_unknown_levels_are_filled_from_older(self, make_record) -> None:
        newer = resolve_path(make_record(district=""))
        older = resolve_path(make_record(subCounty="Layibi"))

        merged = merge_paths(newer, older)
        assert merged.district == "Gulu"
        assert merged.region == "Northern Region"
        assert merged.sub_county == "Layibi"

    def test_sub_county_from_another_district_is_not_borrowed(self, make_record) -> None:
        newer = resolve_path(make_record(district="Kampala"))
        older = resolve_path(make_record(subCounty="Layibi"))
        assert merge_paths(newer, older).sub_county == UNKNOWN_SUB_COUNTY
