"""
JSON loader for fidelity driver sets.

Shape::

    {
      "driver_sets": {
        "default": [{"driver": "observation_coverage", "weight": 1.0}, ...],
        "school":  [...]
      }
    }

Any scope level without its own entry uses ``default``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from fidelity.config.models import DriverSets, DriverWeight
from fidelity.drivers import KNOWN_DRIVERS
from hierarchy.scope import ScopeLevel

logger = logging.getLogger(__name__)

DEFAULT_DRIVER_SET_KEY = "default"
BUNDLED_CONFIG_PATH = Path(__file__).resolve().parent / "driver_sets.json"


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


def load_driver_sets(config_path: str | None = None) -> DriverSets:
    """
    Load driver sets from a JSON file; the bundled file when *config_path* is None.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The file is structurally invalid, names an unknown
            driver or scope level, or has no ``default`` set.
    """

    path = BUNDLED_CONFIG_PATH if config_path is None else _resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Fidelity driver config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    sets = raw_data.get("driver_sets") if isinstance(raw_data, dict) else None
    if not isinstance(sets, dict):
        raise ValueError("Invalid fidelity config: 'driver_sets' must be an object.")
    if DEFAULT_DRIVER_SET_KEY not in sets:
        raise ValueError("Invalid fidelity config: a 'default' driver set is required.")

    by_level: dict[str, tuple[DriverWeight, ...]] = {}
    for key, entries in sets.items():
        level = str(key).strip().lower()
        if level != DEFAULT_DRIVER_SET_KEY and level not in ScopeLevel.ORDERED:
            raise ValueError(f"Invalid fidelity config: unknown scope level {key!r}.")
        by_level[level] = _parse_driver_set(level, entries)

    default = by_level.pop(DEFAULT_DRIVER_SET_KEY)
    logger.info(
        "Loaded fidelity driver sets path=%s default=%s overrides=%s",
        path,
        [item.driver for item in default],
        sorted(by_level),
    )
    return DriverSets(default=default, by_level=by_level)


def _parse_driver_set(level: str, entries: object) -> tuple[DriverWeight, ...]:
    if not isinstance(entries, list) or not entries:
        raise ValueError(f"Invalid fidelity config: driver set {level!r} must be a non-empty list.")

    parsed: list[DriverWeight] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid fidelity config: entries in {level!r} must be objects.")
        driver = str(entry.get("driver", "")).strip()
        if driver not in KNOWN_DRIVERS:
            raise ValueError(
                f"Invalid fidelity config: unknown driver {driver!r} in {level!r}. "
                f"Known drivers: {sorted(KNOWN_DRIVERS)}."
            )
        weight = _optional_float(entry.get("weight"), 1.0)
        if weight < 0:
            raise ValueError(f"Invalid fidelity config: negative weight for {driver!r}.")
        parsed.append(DriverWeight(driver=driver, weight=weight))
    return tuple(parsed)


def _optional_float(value: object, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
