"""
hierarchy/resolver.py

Maps a school record to its administrative ancestor chain.

Unknown or missing levels resolve to sentinel buckets rather than
failing, so every record lands somewhere in the tree and gaps stay
visible as their own aggregation bucket.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from hierarchy.uganda import REGION_DISTRICTS
from records.payload import payload_text
from records.types import RawRecord

COUNTRY_NAME: Final[str] = "Uganda"
UNKNOWN_REGION: Final[str] = "Unknown Region"
UNKNOWN_DISTRICT: Final[str] = "Unknown District"
UNKNOWN_SUB_COUNTY: Final[str] = "Unknown Sub-County"

_SUB_COUNTY_KEYS: Final[tuple[str, ...]] = ("subCounty", "sub_county")


def normalize_name(value: str) -> str:
    """Case- and whitespace-insensitive lookup key."""
    return " ".join(value.split()).casefold()


_REGION_BY_DISTRICT: Final[dict[str, str]] = {
    normalize_name(district): region
    for region, districts in REGION_DISTRICTS.items()
    for district in districts
}

_CANONICAL_DISTRICT: Final[dict[str, str]] = {
    normalize_name(district): district
    for districts in REGION_DISTRICTS.values()
    for district in districts
}


@dataclass(frozen=True)
class HierarchyPath:
    """Country -> Region -> District -> Sub-county -> School chain for one school."""

    country: str
    region: str
    district: str
    sub_county: str
    school_id: str | None
    school_name: str


def resolve_region(district: str | None) -> str:
    """Return the region for *district*, or ``UNKNOWN_REGION``."""
    if not district:
        return UNKNOWN_REGION
    return _REGION_BY_DISTRICT.get(normalize_name(district), UNKNOWN_REGION)


def canonical_district(district: str | None) -> str:
    """Return the table spelling of *district*; unknown names are kept as given."""
    if not district or not district.strip():
        return UNKNOWN_DISTRICT
    return _CANONICAL_DISTRICT.get(normalize_name(district), " ".join(district.split()))


def districts_in_region(region: str) -> tuple[str, ...]:
    """Districts listed under *region* (case-insensitive); empty when unknown."""
    wanted = normalize_name(region)
    for name, districts in REGION_DISTRICTS.items():
        if normalize_name(name) == wanted:
            return districts
    return ()


def resolve_path(record: RawRecord) -> HierarchyPath:
    """Resolve the full ancestor chain for *record*."""
    district = canonical_district(record.district)
    region = resolve_region(district) if district != UNKNOWN_DISTRICT else UNKNOWN_REGION

    sub_county = ""
    for key in _SUB_COUNTY_KEYS:
        sub_county = payload_text(record.payload, key)
        if sub_county:
            break

    school_id = record.school_key
    return HierarchyPath(
        country=COUNTRY_NAME,
        region=region,
        district=district,
        sub_county=" ".join(sub_county.split()) or UNKNOWN_SUB_COUNTY,
        school_id=school_id,
        school_name=record.school_name or (f"School {school_id}" if school_id else ""),
    )


def merge_paths(newer: HierarchyPath, older: HierarchyPath) -> HierarchyPath:
    """
    Fill the Unknown levels of *newer* from *older* for the same school.

    An older sub-county is only borrowed when both records agree on the
    district.
    """
    region, district = newer.region, newer.district
    if district == UNKNOWN_DISTRICT:
        region, district = older.region, older.district
    sub_county = newer.sub_county
    if sub_county == UNKNOWN_SUB_COUNTY and older.district == district:
        sub_county = older.sub_county
    return replace(
        newer,
        region=region,
        district=district,
        sub_county=sub_county,
        school_name=newer.school_name or older.school_name,
    )
