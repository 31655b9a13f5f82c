"""
Turn a historical close series into the empirical return sample the bootstrap
draws from.

Input:  Ordered monthly closes (oldest first)
Output: Simple period returns r[i] = close[i] / close[i-1] - 1

The return sample is the model's only view of future dynamics: paths are built
by resampling these returns i.i.d. with replacement. The close series also
supplies the clamp bounds that keep compounded paths near observed history.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from core.errors import InvalidHistory
from core.utils import as_float_array, frozen


@dataclass(frozen=True)
class ReturnSummary:
    """Summary statistics for an empirical monthly return sample."""
    mean: float
    std: float
    min_val: float
    max_val: float
    n_observations: int

    def __repr__(self) -> str:
        return (
            f"ReturnSummary(mean={self.mean:.4%}, std={self.std:.4%}, "
            f"range=[{self.min_val:.4%}, {self.max_val:.4%}], "
            f"n={self.n_observations})"
        )


def closes_to_returns(closes: Iterable[float]) -> np.ndarray:
    """
    Simple period returns from an ordered close series.

    Returns a read-only array of length len(closes) - 1.
    Raises InvalidHistory for fewer than 2 closes or non-finite / non-positive prices.
    """
    # local import: data_prep depends on this module
    from data_prep.validators import validate_closes

    arr = validate_closes(closes)
    return frozen(arr[1:] / arr[:-1] - 1.0)


def historical_clamp_bounds(
    closes: Iterable[float],
    lower_factor: float = 0.85,
    upper_factor: float = 1.15,
) -> Tuple[float, float]:
    """Clamp bounds (min * lower_factor, max * upper_factor) over the close history."""
    arr = as_float_array(closes)
    if arr.size == 0:
        raise InvalidHistory("Cannot derive clamp bounds from an empty history.")
    return float(np.min(arr) * lower_factor), float(np.max(arr) * upper_factor)


def summarize_returns(returns: Iterable[float]) -> ReturnSummary:
    arr = as_float_array(returns)
    if arr.size == 0:
        raise InvalidHistory("Return series is empty.")
    return ReturnSummary(
        mean=float(np.mean(arr)),
        std=float(np.std(arr)),
        min_val=float(np.min(arr)),
        max_val=float(np.max(arr)),
        n_observations=int(arr.size),
    )
