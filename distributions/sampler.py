"""
Bootstrap Path Simulator — generates N independent FX rate paths over the horizon.

THIS IS WHERE ALL THE RANDOMNESS LIVES.

Input:  Spot, empirical monthly returns, horizon, number of trials, optional clamp bounds
Output: (N × (months+1)) matrix of simulated rates — one row per trial

Each row represents one plausible future for the exchange rate:
  Path 1: 1.2650 → 1.2811 → 1.2594 → ...  (drifts up, then back)
  Path 2: 1.2650 → 1.2398 → 1.2140 → ...  (sterling weakens)

Method, per trial:
  1. Start at spot
  2. For each month draw one historical return uniformly WITH replacement
  3. Multiply the running rate by (1 + r)
  4. Clamp into [clamp_lower, clamp_upper] if bounds are set

Returns are treated as i.i.d. draws from the empirical distribution; that is the
model's only assumption about future dynamics. Clamping keeps compounded
bootstrap noise from wandering far outside the observed range.

Trials never read each other's state, so the trial set can be split into shards
that run concurrently, each with its own spawned generator.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from core.utils import frozen, split_evenly
from data_prep.validators import validate_history, validate_simulation_inputs

from .draws import DrawProvider, RandomIndexDraws, spawn_draw_providers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathSet:
    """
    Output of path simulation: `sims` rate paths of length months + 1.

    spots[k, 0] is the spot for every k; spots[k, t] is the simulated rate at
    month t. The array is read-only.
    """
    spots: np.ndarray  # shape (sims, months + 1)
    clamp_lower: Optional[float] = None
    clamp_upper: Optional[float] = None

    @property
    def sims(self) -> int:
        return int(self.spots.shape[0])

    @property
    def months(self) -> int:
        return int(self.spots.shape[1]) - 1

    @property
    def spot(self) -> float:
        return float(self.spots[0, 0])

    def path(self, k: int) -> np.ndarray:
        return self.spots[k]

    def summary(self, pcts: Tuple[float, ...] = (0.05, 0.50, 0.95)) -> pd.DataFrame:
        """Per-month mean and percentile band of the simulated rate."""
        out = {"month": np.arange(self.months + 1), "mean": self.spots.mean(axis=0)}
        for p in pcts:
            out[f"p{int(round(p * 100)):02d}"] = np.percentile(self.spots, p * 100, axis=0)
        return pd.DataFrame(out)


def build_paths(
    spot: float,
    returns: np.ndarray,
    indices: np.ndarray,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
) -> np.ndarray:
    """
    Compound `returns[indices]` from `spot`, clamping after every step.

    `indices` has shape (sims, months); the result has shape (sims, months + 1).
    Bit-for-bit reproducible for a given index matrix.
    """
    sims, months = indices.shape
    growth = 1.0 + returns[indices]
    clamp = clamp_lower is not None or clamp_upper is not None

    spots = np.empty((sims, months + 1), dtype=float)
    spots[:, 0] = spot
    rate = np.full(sims, float(spot))
    for t in range(months):
        rate = rate * growth[:, t]
        if clamp:
            rate = np.clip(rate, clamp_lower, clamp_upper)
        spots[:, t + 1] = rate
    return spots


class BootstrapPathSampler:
    """
    Generates bootstrap FX paths from an empirical return sample.

    Usage:
        sampler = BootstrapPathSampler(spot=1.265, monthly_returns=rets, months=12, sims=5000, seed=42)
        paths = sampler.sample()
        # paths.spots → (5000, 13) array
        # paths.summary() → per-month percentile bands

    Pass `draws` to control randomness explicitly (e.g. FixedIndexDraws in tests).
    With n_workers > 1 and no explicit provider, trials are split into n_workers
    shards, each drawing from a generator spawned off SeedSequence(seed); results
    are then a function of (seed, sims, n_workers) only.
    """

    def __init__(
        self,
        spot: float,
        monthly_returns: Iterable[float],
        *,
        months: int = 12,
        sims: int = 5000,
        clamp_lower: Optional[float] = None,
        clamp_upper: Optional[float] = None,
        draws: Optional[DrawProvider] = None,
        seed: Optional[int] = None,
        n_workers: int = 1,
    ):
        self.returns = frozen(validate_history(monthly_returns))
        validate_simulation_inputs(
            spot=spot, months=months, sims=sims,
            clamp_lower=clamp_lower, clamp_upper=clamp_upper,
            seed=seed,
        )
        self.spot = float(spot)
        self.months = int(months)
        self.sims = int(sims)
        self.clamp_lower = None if clamp_lower is None else float(clamp_lower)
        self.clamp_upper = None if clamp_upper is None else float(clamp_upper)
        self.draws = draws
        self.seed = seed
        self.n_workers = max(1, int(n_workers))

        if (self.clamp_lower is not None and self.spot < self.clamp_lower) or (
            self.clamp_upper is not None and self.spot > self.clamp_upper
        ):
            logger.warning(
                "Spot %.6f lies outside clamp bounds [%s, %s]; only path[0] will sit outside",
                self.spot, self.clamp_lower, self.clamp_upper,
            )

    def _run_shard(self, provider: DrawProvider, n: int) -> np.ndarray:
        idx = provider.draw(len(self.returns), n, self.months)
        return build_paths(self.spot, self.returns, idx, self.clamp_lower, self.clamp_upper)

    def sample(self) -> PathSet:
        if self.draws is not None or self.n_workers == 1:
            provider = self.draws if self.draws is not None else RandomIndexDraws(self.seed)
            spots = self._run_shard(provider, self.sims)
        else:
            sizes = split_evenly(self.sims, self.n_workers)
            providers = spawn_draw_providers(self.seed, len(sizes))
            logger.debug("Simulating %d paths in %d shards", self.sims, len(sizes))
            with ThreadPoolExecutor(max_workers=len(sizes)) as pool:
                blocks = list(pool.map(self._run_shard, providers, sizes))
            spots = np.vstack(blocks)

        return PathSet(
            spots=frozen(spots),
            clamp_lower=self.clamp_lower,
            clamp_upper=self.clamp_upper,
        )


def simulate_fx_paths(
    spot: float,
    monthly_returns: Iterable[float],
    *,
    months: int = 12,
    sims: int = 5000,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
    draws: Optional[DrawProvider] = None,
    seed: Optional[int] = None,
    n_workers: int = 1,
) -> PathSet:
    """Functional wrapper around BootstrapPathSampler(...).sample()."""
    return BootstrapPathSampler(
        spot,
        monthly_returns,
        months=months,
        sims=sims,
        clamp_lower=clamp_lower,
        clamp_upper=clamp_upper,
        draws=draws,
        seed=seed,
        n_workers=n_workers,
    ).sample()
