"""
Distributions package — the empirical return sample and the bootstrap paths drawn from it.

  1. returns.py  — closes → simple monthly returns, clamp bounds from history
  2. draws.py    — explicit random-draw providers (seeded, fixed, per-shard)
  3. sampler.py  — bootstrap-resample returns into N independent rate paths
"""

from .returns import ReturnSummary, closes_to_returns, historical_clamp_bounds, summarize_returns
from .draws import DrawProvider, FixedIndexDraws, RandomIndexDraws, spawn_draw_providers
from .sampler import BootstrapPathSampler, PathSet, build_paths, simulate_fx_paths

__all__ = [
    "ReturnSummary",
    "closes_to_returns",
    "historical_clamp_bounds",
    "summarize_returns",
    "DrawProvider",
    "FixedIndexDraws",
    "RandomIndexDraws",
    "spawn_draw_providers",
    "BootstrapPathSampler",
    "PathSet",
    "build_paths",
    "simulate_fx_paths",
]
