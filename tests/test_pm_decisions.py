"""
Tests for the hedge comparison report.
"""

import pytest

from core.config import SimulationConfig
from distributions.draws import FixedIndexDraws
from engine.runner import run_cfar_analysis
from pm.decisions import compare_hedges


def test_comparison_with_hedge(returns):
    analysis = run_cfar_analysis(
        1.05, returns, [100.0] * 6, hedge_ratio=0.5, forward_rate=1.05,
        months=6, sims=500, config=SimulationConfig(seed=1),
    )
    report = compare_hedges(analysis, pair="GBPUSD")
    assert report.pair == "GBPUSD"
    assert report.selected_cfar == pytest.approx(0.5 * report.unhedged_cfar)
    assert report.fully_hedged_cfar == 0.0
    df = report.to_dataframe()
    assert list(df["Scenario"]) == ["Unhedged", "Selected hedge", "100% hedged"]
    assert not any(f.startswith("HEDGE_INCREASES_RISK") for f in report.flags)


def test_comparison_without_forward(returns):
    analysis = run_cfar_analysis(1.05, returns, [100.0] * 6, months=6, sims=500)
    report = compare_hedges(analysis)
    assert report.selected_mean is None
    assert report.fully_hedged_mean is None
    assert len(report.to_dataframe()) == 1


def test_degenerate_flag(returns):
    analysis = run_cfar_analysis(
        1.05, returns, [100.0] * 3, months=3, sims=100, draws=FixedIndexDraws(0),
    )
    report = compare_hedges(analysis)
    assert any(f.startswith("DEGENERATE_DISTRIBUTION") for f in report.flags)
