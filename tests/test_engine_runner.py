"""
Tests for the CFaR run orchestration.

**Purpose**: The three run modes, shared paths across scenarios, risk
reduction, and validation happening before any simulation work.
"""

import numpy as np
import pytest

from core.config import SimulationConfig
from core.errors import InvalidHistory, InvalidRange, InvalidSchedule
from distributions.draws import FixedIndexDraws
from distributions.sampler import simulate_fx_paths
from engine.runner import (
    apply_hedging_to_paths,
    risk_reduction_pct,
    run_cfar_analysis,
    simulate_cfar,
    simulate_hedged_cfar,
)
from pm.aggregator import summarize_outcomes


def _analysis(returns, **kw):
    base = dict(
        hedge_ratio=0.5, forward_rate=1.05, months=6, sims=1000,
        clamp_lower=0.85, clamp_upper=1.265, config=SimulationConfig(seed=3),
    )
    base.update(kw)
    return run_cfar_analysis(1.05, returns, [100.0] * base["months"], **base)


def test_simulate_cfar_fixed_draws(returns):
    """Identical paths give a degenerate distribution: mean = p5, cfar = 0."""
    res = simulate_cfar(1.05, returns, [100.0] * 3, months=3, sims=100, draws=FixedIndexDraws(0))
    assert res.mean == pytest.approx(382.305)
    assert res.p5 == pytest.approx(382.305)
    assert res.cfar == pytest.approx(0.0, abs=1e-9)
    assert res.hist.counts[0] == 100
    assert res.sims == 100
    assert res.months == 3


def test_simulate_hedged_cfar_fixed_draws(returns):
    res = simulate_hedged_cfar(
        1.05, returns, [100.0] * 3, hedge_ratio=1.0, forward_rate=1.05, hedge_tenor_months=1,
        months=3, sims=100, draws=FixedIndexDraws(0),
    )
    assert res.unhedged.mean == pytest.approx(382.305)
    assert res.hedged.mean == pytest.approx(220.5)
    assert res.hedge_ratio == 1.0
    d = res.to_dict()
    assert set(d) == {"unhedged", "hedged", "hedgeRatio", "forwardRate", "riskReductionPct"}


def test_same_seed_same_result(returns):
    cfg = SimulationConfig(seed=21)
    a = simulate_cfar(1.05, returns, [1.0] * 12, config=cfg, sims=500)
    b = simulate_cfar(1.05, returns, [1.0] * 12, config=cfg, sims=500)
    assert a == b


def test_analysis_without_forward_is_unhedged_only(returns):
    analysis = _analysis(returns, forward_rate=None)
    assert analysis.selected is None
    assert analysis.fully_hedged is None
    assert not analysis.has_hedge
    assert set(analysis.outcomes) == {"unhedged"}


def test_analysis_scenarios_share_paths(returns):
    """Selected and fully-hedged runs see the same unhedged outcomes."""
    analysis = _analysis(returns)
    assert analysis.selected.unhedged is analysis.unhedged
    assert analysis.fully_hedged.unhedged is analysis.unhedged
    assert analysis.paths.sims == 1000

    # re-running the ledger over the stored paths reproduces the stored outcomes
    again = apply_hedging_to_paths(
        analysis.paths, [100.0] * 6, hedge_ratio=0.5, forward_rate=1.05,
    )
    assert np.isclose(again.hedged.mean, analysis.selected.hedged.mean)
    assert np.isclose(again.unhedged.mean, analysis.unhedged.mean)


def test_full_hedge_default_tenor_removes_all_risk(returns):
    """ratio=1 with tenor=months: hedged totals are 0 on every path, CFaR 0."""
    analysis = _analysis(returns)
    full = analysis.fully_hedged
    assert np.all(analysis.outcomes["fully_hedged"] == 0.0)
    assert full.hedged.cfar == 0.0
    assert full.risk_reduction_pct == pytest.approx(100.0)


def test_cfar_monotone_in_ratio_default_tenor(returns):
    """With the default tenor, hedged = (1 - h) * unhedged so CFaR falls with h."""
    cfars = []
    for h in (0.0, 0.25, 0.5, 0.75, 1.0):
        a = _analysis(returns, hedge_ratio=h)
        cfars.append(a.selected.hedged.cfar)
        assert a.selected.hedged.cfar == pytest.approx((1 - h) * a.unhedged.cfar)
    assert all(x >= y - 1e-9 for x, y in zip(cfars, cfars[1:]))


def test_zero_ratio_selected_equals_unhedged(returns):
    analysis = _analysis(returns, hedge_ratio=0.0, hedge_tenor_months=2)
    assert np.array_equal(analysis.outcomes["selected"], analysis.outcomes["unhedged"])
    assert analysis.selected.risk_reduction_pct == 0.0


def test_tenor_from_config(returns):
    analysis = _analysis(returns, config=SimulationConfig(seed=3, hedge_tenor_months=2))
    assert analysis.hedge_tenor_months == 2


def test_risk_reduction_pct_zero_when_unhedged_cfar_not_positive():
    flat = summarize_outcomes([5.0] * 10, months=1)
    wide = summarize_outcomes(np.arange(10.0), months=1)
    assert risk_reduction_pct(flat, wide) == 0.0
    assert risk_reduction_pct(wide, flat) == pytest.approx(100.0)


@pytest.mark.parametrize("kwargs, exc", [
    (dict(hedge_ratio=1.5), InvalidRange),
    (dict(forward_rate=-1.0), InvalidRange),
    (dict(hedge_tenor_months=0), InvalidRange),
    (dict(sims=10), InvalidRange),
    (dict(clamp_lower=2.0, clamp_upper=1.0), InvalidRange),
])
def test_invalid_inputs_raise_before_simulation(returns, kwargs, exc, monkeypatch):
    """No path is drawn when any input is invalid."""
    import distributions.sampler as sampler_mod

    def _fail(*a, **k):
        raise AssertionError("paths built despite invalid input")

    monkeypatch.setattr(sampler_mod, "build_paths", _fail)
    with pytest.raises(exc):
        _analysis(returns, **kwargs)


def test_schedule_length_mismatch(returns):
    with pytest.raises(InvalidSchedule, match="exposures must be length 6"):
        run_cfar_analysis(1.05, returns, [1.0] * 5, months=6, sims=100)


def test_empty_history(returns):
    with pytest.raises(InvalidHistory):
        run_cfar_analysis(1.05, [], [1.0] * 6, months=6, sims=100)


def test_apply_hedging_to_existing_paths(returns):
    paths = simulate_fx_paths(1.05, returns, months=3, sims=100, draws=FixedIndexDraws(0))
    res = apply_hedging_to_paths(paths, [100.0] * 3, hedge_ratio=1.0, forward_rate=1.05, hedge_tenor_months=1)
    assert res.hedged.mean == pytest.approx(220.5)


def test_months_default_to_schedule_length(returns):
    """Without months=, the horizon is len(exposures), not the config default."""
    res = simulate_cfar(1.05, returns, [100.0] * 6, sims=100, draws=FixedIndexDraws(0))
    assert res.months == 6
    analysis = run_cfar_analysis(1.05, returns, [100.0] * 6, forward_rate=1.05, sims=100)
    assert analysis.paths.months == 6
    assert analysis.hedge_tenor_months == 6
    hedged = simulate_hedged_cfar(1.05, returns, [1.0] * 4, hedge_ratio=0.5, forward_rate=1.05, sims=100)
    assert hedged.hedged.months == 4


def test_empty_schedule_without_months(returns):
    with pytest.raises(InvalidSchedule):
        run_cfar_analysis(1.05, returns, [], sims=100)


def test_cfar_monotone_in_ratio_one_month_tenor(sample_dataset):
    """
    With monthly layers locked one month ahead at forward = spot, CFaR still
    falls as the hedge ratio rises on the bundled GBPUSD history.
    """
    history = sample_dataset.get("GBP", "USD")
    lo, hi = history.clamp_bounds()
    cfars = []
    for h in (0.0, 0.25, 0.5, 0.75, 1.0):
        analysis = run_cfar_analysis(
            history.spot, history.returns, [100_000.0] * 12,
            hedge_ratio=h, forward_rate=history.spot, hedge_tenor_months=1,
            sims=5000, clamp_lower=lo, clamp_upper=hi, config=SimulationConfig(seed=7),
        )
        cfars.append(analysis.selected.hedged.cfar)
    assert cfars[0] == pytest.approx(analysis.unhedged.cfar)
    assert all(y <= x * 1.01 for x, y in zip(cfars, cfars[1:]))
    assert cfars[-1] < cfars[0]
