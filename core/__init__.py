"""
Core package — configuration, error taxonomy, and shared numeric helpers.
No business logic lives here.
"""

from .config import MONTHS_RANGE, SIMS_RANGE, SimulationConfig
from .errors import CFaRError, InvalidHistory, InvalidRange, InvalidSchedule, UnknownPair
from .utils import all_finite, as_float_array, frozen, require_columns, split_evenly

__all__ = [
    "MONTHS_RANGE",
    "SIMS_RANGE",
    "SimulationConfig",
    "CFaRError",
    "InvalidHistory",
    "InvalidRange",
    "InvalidSchedule",
    "UnknownPair",
    "all_finite",
    "as_float_array",
    "frozen",
    "require_columns",
    "split_evenly",
]
