"""
hierarchy package marker.
"""

from hierarchy.resolver import (
    COUNTRY_NAME,
    UNKNOWN_DISTRICT,
    UNKNOWN_REGION,
    UNKNOWN_SUB_COUNTY,
    HierarchyPath,
    districts_in_region,
    merge_paths,
    resolve_path,
    resolve_region,
)
from hierarchy.scope import InvalidScopeError, Scope, ScopeLevel

__all__ = [
    "COUNTRY_NAME",
    "UNKNOWN_DISTRICT",
    "UNKNOWN_REGION",
    "UNKNOWN_SUB_COUNTY",
    "HierarchyPath",
    "InvalidScopeError",
    "Scope",
    "ScopeLevel",
    "districts_in_region",
    "merge_paths",
    "resolve_path",
    "resolve_region",
]
