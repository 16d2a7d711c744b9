"""
hierarchy/scope.py

Administrative scope selection (level + identifier).

An invalid scope level is a caller error and the only hierarchy problem
that aborts a computation; unknown identifiers simply match nothing.

A sub-county is named either alone ("Layibi", matching that name in any
district) or qualified by its district ("Gulu/Layibi").
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from hierarchy.resolver import COUNTRY_NAME, HierarchyPath, canonical_district, normalize_name

# Separates district and sub-county in a qualified sub-county identifier.
SUB_COUNTY_SEPARATOR: Final[str] = "/"


class InvalidScopeError(ValueError):
    """Raised when a caller passes a scope level the engine does not know."""


class ScopeLevel:
    COUNTRY = "country"
    REGION = "region"
    DISTRICT = "district"
    SUB_COUNTY = "sub_county"
    SCHOOL = "school"

    ORDERED: Final[tuple[str, ...]] = (COUNTRY, REGION, DISTRICT, SUB_COUNTY, SCHOOL)

    # Accepted spellings from query strings and cost entries.
    ALIASES: Final[dict[str, str]] = {
        "country": COUNTRY,
        "national": COUNTRY,
        "region": REGION,
        "district": DISTRICT,
        "sub_county": SUB_COUNTY,
        "sub-county": SUB_COUNTY,
        "subcounty": SUB_COUNTY,
        "school": SCHOOL,
    }


@dataclass(frozen=True)
class Scope:
    """A level of the administrative hierarchy plus the unit selected at that level."""

    level: str
    identifier: str

    @classmethod
    def parse(cls, level: str | None, identifier: str | None = None) -> "Scope":
        """
        Validate and normalise a caller-supplied scope.

        Raises
        ------
        InvalidScopeError
            If *level* is not one of ``ScopeLevel.ORDERED`` (or an alias),
            or a non-country scope has no identifier.
        """
        key = (level or "").strip().lower()
        canonical = ScopeLevel.ALIASES.get(key)
        if canonical is None:
            raise InvalidScopeError(
                f"Unsupported scope level {level!r}. "
                f"Allowed values: {list(ScopeLevel.ORDERED)}."
            )
        if canonical == ScopeLevel.COUNTRY:
            return cls(level=canonical, identifier=(identifier or COUNTRY_NAME).strip())
        ident = (identifier or "").strip()
        if not ident:
            raise InvalidScopeError(f"Scope level {canonical!r} requires an identifier.")
        return cls(level=canonical, identifier=ident)

    @classmethod
    def country(cls) -> "Scope":
        return cls(level=ScopeLevel.COUNTRY, identifier=COUNTRY_NAME)

    def contains(self, path: HierarchyPath) -> bool:
        """Return True when *path* lies inside this scope."""
        if self.level == ScopeLevel.COUNTRY:
            return True
        wanted = normalize_name(self.identifier)
        if self.level == ScopeLevel.SCHOOL:
            return wanted in {
                normalize_name(path.school_id or ""),
                normalize_name(path.school_name),
            }
        if self.level == ScopeLevel.SUB_COUNTY and SUB_COUNTY_SEPARATOR in self.identifier:
            district, _, sub_county = self.identifier.partition(SUB_COUNTY_SEPARATOR)
            return (
                normalize_name(path.district) == normalize_name(canonical_district(district))
                and normalize_name(path.sub_county) == normalize_name(sub_county)
            )
        return normalize_name(unit_name(path, self.level)) == wanted

    def child_level(self) -> str | None:
        """The next level down, or None for a school scope."""
        index = ScopeLevel.ORDERED.index(self.level)
        if index + 1 >= len(ScopeLevel.ORDERED):
            return None
        return ScopeLevel.ORDERED[index + 1]


def unit_name(path: HierarchyPath, level: str) -> str:
    """Name of the unit at *level* along *path*."""
    if level == ScopeLevel.COUNTRY:
        return path.country
    if level == ScopeLevel.REGION:
        return path.region
    if level == ScopeLevel.DISTRICT:
        return path.district
    if level == ScopeLevel.SUB_COUNTY:
        return path.sub_county
    if level == ScopeLevel.SCHOOL:
        return path.school_name or (path.school_id or "")
    raise InvalidScopeError(f"Unsupported scope level {level!r}.")


def unit_identifier(path: HierarchyPath, level: str) -> str:
    """Identifier that selects exactly the unit at *level* along *path*."""
    if level == ScopeLevel.SCHOOL:
        return path.school_id or unit_name(path, level)
    if level == ScopeLevel.SUB_COUNTY:
        return f"{path.district}{SUB_COUNTY_SEPARATOR}{path.sub_county}"
    return unit_name(path, level)
