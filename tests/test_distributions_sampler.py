"""
Tests for bootstrap path simulation.

**Purpose**: Verify path shape, clamping, reproducibility and the worked
compounding example with a fixed draw sequence.
"""

import numpy as np
import pytest

from core.errors import InvalidHistory, InvalidRange
from distributions.draws import FixedIndexDraws
from distributions.sampler import BootstrapPathSampler, PathSet, build_paths, simulate_fx_paths


def test_fixed_draw_path_compounds(returns):
    """Always drawing +10% from 1.05 gives 1.155, 1.2705, 1.39755."""
    paths = simulate_fx_paths(1.05, returns, months=3, sims=100, draws=FixedIndexDraws(0))
    assert paths.spots.shape == (100, 4)
    assert np.allclose(paths.path(0), [1.05, 1.155, 1.2705, 1.39755])
    assert np.allclose(paths.spots, paths.path(0))


def test_every_path_starts_at_spot(returns):
    paths = simulate_fx_paths(1.02, returns, months=12, sims=300, seed=5)
    assert np.all(paths.spots[:, 0] == 1.02)
    assert paths.spot == 1.02
    assert paths.sims == 300
    assert paths.months == 12


def test_paths_respect_clamp_bounds(returns):
    """Every step after path[0] lies within [lower, upper]."""
    paths = simulate_fx_paths(
        1.05, returns, months=24, sims=2000, seed=1, clamp_lower=0.95, clamp_upper=1.12,
    )
    body = paths.spots[:, 1:]
    assert body.min() >= 0.95
    assert body.max() <= 1.12


def test_clamp_hit_every_step():
    """A huge return pins every step at the upper bound."""
    paths = simulate_fx_paths(1.0, [5.0], months=4, sims=100, clamp_lower=0.5, clamp_upper=1.5, seed=0)
    assert np.all(paths.spots[:, 1:] == 1.5)


def test_spot_outside_bounds_only_first_point(caplog):
    """Spot outside the clamp window is kept at path[0]; later steps are clamped."""
    paths = simulate_fx_paths(2.0, [0.0], months=3, sims=100, clamp_lower=0.5, clamp_upper=1.5, seed=0)
    assert np.all(paths.spots[:, 0] == 2.0)
    assert np.all(paths.spots[:, 1:] == 1.5)
    assert "outside clamp bounds" in caplog.text


def test_same_seed_same_paths(returns):
    a = simulate_fx_paths(1.05, returns, months=6, sims=500, seed=123)
    b = simulate_fx_paths(1.05, returns, months=6, sims=500, seed=123)
    assert np.array_equal(a.spots, b.spots)


def test_sharded_run_deterministic(returns):
    """With n_workers > 1, output is a function of (seed, sims, n_workers)."""
    kw = dict(months=6, sims=1001, seed=4, n_workers=3)
    a = simulate_fx_paths(1.05, returns, **kw)
    b = simulate_fx_paths(1.05, returns, **kw)
    assert a.spots.shape == (1001, 7)
    assert np.array_equal(a.spots, b.spots)


def test_paths_only_use_sample_returns(returns):
    """Unclamped paths move by exactly one of the sample returns each month."""
    paths = simulate_fx_paths(1.05, returns, months=5, sims=200, seed=8)
    growth = paths.spots[:, 1:] / paths.spots[:, :-1] - 1.0
    dist = np.abs(growth[..., None] - np.asarray(returns)[None, None, :]).min(axis=-1)
    assert dist.max() < 1e-12


def test_pathset_read_only(returns):
    paths = simulate_fx_paths(1.05, returns, months=2, sims=100, seed=0)
    with pytest.raises(ValueError):
        paths.spots[0, 0] = 9.0


def test_build_paths_direct():
    idx = np.array([[0, 1], [1, 1]])
    spots = build_paths(2.0, np.array([0.5, -0.5]), idx)
    assert np.allclose(spots, [[2.0, 3.0, 1.5], [2.0, 1.0, 0.5]])


def test_pathset_summary_bands(returns):
    paths = simulate_fx_paths(1.05, returns, months=3, sims=100, seed=2)
    summary = paths.summary()
    assert list(summary.columns) == ["month", "mean", "p05", "p50", "p95"]
    assert len(summary) == 4
    assert np.allclose(summary["mean"], paths.spots.mean(axis=0))
    assert (summary["p05"] <= summary["p95"]).all()
    assert isinstance(paths, PathSet)


@pytest.mark.parametrize("kwargs", [
    dict(months=0), dict(months=61), dict(sims=99), dict(sims=200_001),
    dict(clamp_lower=1.2, clamp_upper=1.1), dict(clamp_lower=float("nan")),
])
def test_invalid_ranges_rejected(returns, kwargs):
    base = dict(months=3, sims=100)
    base.update(kwargs)
    with pytest.raises(InvalidRange):
        BootstrapPathSampler(1.05, returns, **base)


@pytest.mark.parametrize("spot", [0.0, -1.0, float("nan")])
def test_invalid_spot_rejected(returns, spot):
    with pytest.raises(InvalidRange):
        BootstrapPathSampler(spot, returns, months=3, sims=100)


def test_empty_returns_rejected():
    with pytest.raises(InvalidHistory):
        BootstrapPathSampler(1.05, [], months=3, sims=100)


def test_negative_seed_rejected_before_drawing(returns):
    with pytest.raises(InvalidRange, match="seed"):
        BootstrapPathSampler(1.05, returns, months=3, sims=100, seed=-1)
