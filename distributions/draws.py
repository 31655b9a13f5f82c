"""
Random-draw providers for bootstrap resampling.

A provider hands the path simulator a (sims × months) matrix of indices into the
return series. All randomness in the engine flows through one of these, so a
run is reproducible from its provider alone and parallel shards never share a
mutable generator.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Union

import numpy as np

from core.errors import InvalidRange


class DrawProvider(Protocol):
    def draw(self, n_returns: int, sims: int, months: int) -> np.ndarray:
        """Integer indices in [0, n_returns), shape (sims, months)."""
        ...


class RandomIndexDraws:
    """Uniform draws with replacement from a numpy Generator."""

    def __init__(self, rng: Union[np.random.Generator, int, None] = None):
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    def draw(self, n_returns: int, sims: int, months: int) -> np.ndarray:
        return self.rng.integers(0, n_returns, size=(sims, months))


class FixedIndexDraws:
    """
    Replays a predetermined index sequence.

    `indices` may be a scalar (same index every step), a length-`months` row
    applied to every trial, a full (sims, months) matrix, or a flat sequence
    with at least sims * months entries consumed row by row.
    """

    def __init__(self, indices: Union[int, Sequence[int], np.ndarray]):
        self.indices = np.asarray(indices, dtype=np.int64)

    def draw(self, n_returns: int, sims: int, months: int) -> np.ndarray:
        idx = self.indices
        if idx.ndim == 1 and idx.size >= sims * months and idx.size != months:
            out = idx[: sims * months].reshape(sims, months)
        else:
            try:
                out = np.broadcast_to(idx, (sims, months))
            except ValueError:
                raise InvalidRange(
                    f"Fixed draw sequence of shape {idx.shape} cannot cover {sims}×{months} draws."
                ) from None
        if out.size and (out.min() < 0 or out.max() >= n_returns):
            raise InvalidRange(f"Fixed draw indices must lie in [0, {n_returns}).")
        return np.array(out)


def spawn_draw_providers(seed: Optional[int], n: int) -> list:
    """Independent providers for `n` shards, all derived from one SeedSequence."""
    children = np.random.SeedSequence(seed).spawn(n)
    return [RandomIndexDraws(np.random.default_rng(child)) for child in children]
