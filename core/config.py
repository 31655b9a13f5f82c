"""
Simulation configuration.
Engine inputs that vary per request (spot, returns, exposures, hedge terms) are
passed to the runner directly; this holds the knobs that are usually fixed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidRange

MONTHS_RANGE: Tuple[int, int] = (1, 60)
SIMS_RANGE: Tuple[int, int] = (100, 200_000)


@dataclass(frozen=True)
class SimulationConfig:
    months: int = 12
    sims: int = 5000
    seed: Optional[int] = 7

    # shards run on a thread pool; each shard gets its own spawned generator
    n_workers: int = 1

    # clamp bounds are derived from history as (min * lower, max * upper)
    clamp_lower_factor: float = 0.85
    clamp_upper_factor: float = 1.15

    # summary settings
    hist_bins: int = 30
    percentile: float = 0.05

    # None -> one hedge window spanning the whole horizon
    hedge_tenor_months: Optional[int] = None

    def validate(self) -> "SimulationConfig":
        lo, hi = MONTHS_RANGE
        if not lo <= self.months <= hi:
            raise InvalidRange(f"months must be {lo}–{hi}")
        lo, hi = SIMS_RANGE
        if not lo <= self.sims <= hi:
            raise InvalidRange(f"sims must be {lo}–{hi}")
        if self.seed is not None and self.seed < 0:
            raise InvalidRange("seed must be a non-negative integer")
        if self.n_workers < 1:
            raise InvalidRange("n_workers must be at least 1")
        if self.hist_bins < 1:
            raise InvalidRange("hist_bins must be at least 1")
        if not 0.0 <= self.percentile <= 1.0:
            raise InvalidRange("percentile must be between 0 and 1")
        if self.hedge_tenor_months is not None and self.hedge_tenor_months < 1:
            raise InvalidRange("hedge_tenor_months must be at least 1")
        return self

    def tenor_for(self, months: int) -> int:
        """Hedge tenor to use for a given horizon."""
        return months if self.hedge_tenor_months is None else int(self.hedge_tenor_months)
