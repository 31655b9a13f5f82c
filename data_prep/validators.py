"""
Input validation for the simulation engine.

Catches problems before any paths are drawn:
- History too short, non-finite, or non-positive
- Exposure schedule of the wrong length or with NaN/inf entries
- Horizon / simulation count outside the supported range
- Hedge ratio outside [0, 1], non-positive forward rate, inverted clamp bounds

Each check raises the matching exception from core.errors; nothing is
collected or downgraded to a warning.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np

from core.config import MONTHS_RANGE, SIMS_RANGE
from core.errors import InvalidHistory, InvalidRange, InvalidSchedule
from core.utils import all_finite, as_float_array


def _is_finite_number(x) -> bool:
    try:
        return math.isfinite(float(x))
    except (TypeError, ValueError):
        return False


def validate_closes(closes: Iterable[float]) -> np.ndarray:
    """Closes must be at least two finite, strictly positive prices."""
    arr = as_float_array(closes)
    if arr.size < 2:
        raise InvalidHistory(f"At least 2 closes are required, got {arr.size}.")
    if not all_finite(arr):
        raise InvalidHistory("Closes contain non-finite values.")
    if np.any(arr <= 0):
        raise InvalidHistory("Closes must be strictly positive.")
    return arr


def validate_history(monthly_returns: Iterable[float]) -> np.ndarray:
    """Return series must be non-empty and finite."""
    arr = as_float_array(monthly_returns)
    if arr.size == 0:
        raise InvalidHistory("Return series is empty.")
    if not all_finite(arr):
        raise InvalidHistory("Return series contains non-finite values.")
    return arr


def validate_schedule(exposures: Iterable[float], months: int) -> np.ndarray:
    arr = as_float_array(exposures)
    if arr.size != months:
        raise InvalidSchedule(f"exposures must be length {months}")
    if not all_finite(arr):
        raise InvalidSchedule("exposures contain non-finite values.")
    return arr


def validate_simulation_inputs(
    *,
    spot: float,
    months: int,
    sims: int,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
    seed: Optional[int] = None,
) -> None:
    if not _is_finite_number(spot) or spot <= 0:
        raise InvalidRange("spot must be a positive finite number")

    lo, hi = MONTHS_RANGE
    if isinstance(months, bool) or int(months) != months or not lo <= months <= hi:
        raise InvalidRange(f"months must be {lo}–{hi}")

    lo, hi = SIMS_RANGE
    if isinstance(sims, bool) or int(sims) != sims or not lo <= sims <= hi:
        raise InvalidRange(f"sims must be {lo}–{hi}")

    for name, bound in (("clampLower", clamp_lower), ("clampUpper", clamp_upper)):
        if bound is not None and not _is_finite_number(bound):
            raise InvalidRange(f"{name} must be finite")
    if clamp_lower is not None and clamp_upper is not None and clamp_lower > clamp_upper:
        raise InvalidRange("clampLower must not exceed clampUpper")
    if seed is not None and (isinstance(seed, bool) or int(seed) != seed or seed < 0):
        raise InvalidRange("seed must be a non-negative integer")


def validate_hedge_inputs(
    *,
    hedge_ratio: float,
    forward_rate: Optional[float],
    hedge_tenor_months: Optional[int] = None,
) -> None:
    """forward_rate=None means no hedge is requested; only the ratio and tenor are checked."""
    if not _is_finite_number(hedge_ratio) or not 0.0 <= hedge_ratio <= 1.0:
        raise InvalidRange("hedgeRatio must be between 0 and 1")
    if forward_rate is not None and (not _is_finite_number(forward_rate) or forward_rate <= 0):
        raise InvalidRange("forwardRate must be a positive number")
    if hedge_tenor_months is not None and (
        int(hedge_tenor_months) != hedge_tenor_months or hedge_tenor_months < 1
    ):
        raise InvalidRange("hedgeTenorMonths must be a positive integer")
