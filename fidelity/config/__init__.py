from fidelity.config.loader import DEFAULT_DRIVER_SET_KEY, load_driver_sets
from fidelity.config.models import DriverSets, DriverWeight

__all__ = ["DEFAULT_DRIVER_SET_KEY", "DriverSets", "DriverWeight", "load_driver_sets"]
