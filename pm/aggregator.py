"""
Summarise N simulated outcomes into the tail-risk numbers a treasurer reads.

Instead of: "Expected GBP receipts = 1.52m" (one number, no context)
The treasurer gets: "mean=1.52m, worst-5% = 1.41m, CFaR = 0.11m" plus the full
histogram of outcomes.

  mean  — arithmetic average of the outcomes
  p5    — nearest-rank 5th percentile: sorted[floor(0.05 * (n - 1))], no interpolation
  CFaR  — mean - p5 (may be negative when the tail sits above the mean)
  hist  — fixed number of equal-width bins spanning [min, max] of the outcomes
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from core.utils import as_float_array

logger = logging.getLogger(__name__)

HIST_BINS = 30
DEGENERATE_WIDTH = 1e-9


@dataclass(frozen=True)
class Histogram:
    """Equal-width bins over [min, max]; counts are in ascending bin order."""
    bins: int
    min: float
    max: float
    counts: List[int] = field(default_factory=list)

    @property
    def width(self) -> float:
        return (self.max - self.min) / self.bins

    def edges(self) -> np.ndarray:
        return self.min + self.width * np.arange(self.bins + 1)

    def to_dict(self) -> Dict:
        return {"bins": self.bins, "min": self.min, "max": self.max, "counts": list(self.counts)}

    def to_dataframe(self) -> pd.DataFrame:
        edges = self.edges()
        return pd.DataFrame({
            "bin": np.arange(self.bins),
            "lower": edges[:-1],
            "upper": edges[1:],
            "count": self.counts,
        })


@dataclass(frozen=True)
class SimulationResult:
    """Public summary of one set of outcomes."""
    mean: float
    p5: float
    cfar: float
    sims: int
    months: int
    hist: Histogram

    def to_dict(self) -> Dict:
        return {
            "mean": self.mean,
            "p5": self.p5,
            "cfar": self.cfar,
            "sims": self.sims,
            "months": self.months,
            "hist": self.hist.to_dict(),
        }


def nearest_rank_percentile(samples: Iterable[float], p: float) -> float:
    """Sorted sample at index floor(p * (n - 1)); p in [0, 1]."""
    arr = np.sort(as_float_array(samples))
    if arr.size == 0:
        raise ValueError("Cannot take a percentile of an empty sample.")
    idx = int(math.floor(p * (arr.size - 1)))
    return float(arr[idx])


def build_histogram(samples: Iterable[float], bins: int = HIST_BINS) -> Histogram:
    """
    Bin samples into `bins` equal-width buckets spanning [min, max].

    If every sample is identical, max is widened by a negligible epsilon so the
    bins have non-zero width; all samples then land in bin 0.
    """
    arr = as_float_array(samples)
    if arr.size == 0:
        raise ValueError("Cannot build a histogram of an empty sample.")

    lo = float(np.min(arr))
    hi = float(np.max(arr))
    if hi == lo:
        logger.debug("All %d outcomes equal %.6f; histogram widened by epsilon", arr.size, lo)
        hi = lo + DEGENERATE_WIDTH
        if hi == lo:
            # epsilon below float resolution at this magnitude
            hi = float(np.nextafter(lo, np.inf))

    width = (hi - lo) / bins
    idx = np.floor((arr - lo) / width).astype(np.int64)
    idx = np.clip(idx, 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)

    return Histogram(bins=bins, min=lo, max=hi, counts=[int(c) for c in counts])


def summarize_outcomes(
    outcomes: Iterable[float],
    *,
    months: int,
    percentile: float = 0.05,
    bins: int = HIST_BINS,
) -> SimulationResult:
    """
    Summarise one outcome set.

    Parameters
    ----------
    outcomes : array-like
        One total home-currency cash flow per simulation trial (finite values)
    months : int
        Horizon the outcomes were simulated over (echoed in the result)
    percentile : float
        Tail level for the nearest-rank percentile (0.05 → p5)
    bins : int
        Histogram bin count
    """
    arr = as_float_array(outcomes)
    m = float(np.mean(arr))
    p5 = nearest_rank_percentile(arr, percentile)
    return SimulationResult(
        mean=m,
        p5=p5,
        cfar=m - p5,
        sims=int(arr.size),
        months=int(months),
        hist=build_histogram(arr, bins=bins),
    )
