"""
Hedge decision support — side-by-side comparison and flags.

Translates a CFaRAnalysis into answers a treasurer can act on:
  Q1: "What do I expect to receive?"          → mean of each scenario
  Q2: "How bad is a bad month-end?"           → p5 and CFaR
  Q3: "How much risk does my hedge remove?"   → risk reduction, selected vs fully hedged
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import pandas as pd

if TYPE_CHECKING:
    from engine.runner import CFaRAnalysis


@dataclass
class HedgeComparison:
    """Structured comparison of the unhedged, selected and fully-hedged runs."""
    pair: str
    hedge_ratio: float
    forward_rate: Optional[float]

    unhedged_mean: float
    unhedged_p5: float
    unhedged_cfar: float

    selected_mean: Optional[float] = None
    selected_p5: Optional[float] = None
    selected_cfar: Optional[float] = None
    selected_risk_reduction_pct: Optional[float] = None

    fully_hedged_mean: Optional[float] = None
    fully_hedged_p5: Optional[float] = None
    fully_hedged_cfar: Optional[float] = None
    fully_hedged_risk_reduction_pct: Optional[float] = None

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per scenario, display-friendly."""
        rows = [{
            "Scenario": "Unhedged",
            "Hedge Ratio": 0.0,
            "Mean": self.unhedged_mean,
            "P05": self.unhedged_p5,
            "CFaR": self.unhedged_cfar,
            "Risk Reduction (%)": None,
        }]
        if self.selected_mean is not None:
            rows.append({
                "Scenario": "Selected hedge",
                "Hedge Ratio": self.hedge_ratio,
                "Mean": self.selected_mean,
                "P05": self.selected_p5,
                "CFaR": self.selected_cfar,
                "Risk Reduction (%)": self.selected_risk_reduction_pct,
            })
        if self.fully_hedged_mean is not None:
            rows.append({
                "Scenario": "100% hedged",
                "Hedge Ratio": 1.0,
                "Mean": self.fully_hedged_mean,
                "P05": self.fully_hedged_p5,
                "CFaR": self.fully_hedged_cfar,
                "Risk Reduction (%)": self.fully_hedged_risk_reduction_pct,
            })
        return pd.DataFrame(rows)


def compare_hedges(analysis: "CFaRAnalysis", *, pair: str = "") -> HedgeComparison:
    """
    Build a HedgeComparison from a CFaRAnalysis.

    Flags:
      NEGATIVE_CFAR            worst-5% outcome sits above the mean
      HEDGE_INCREASES_RISK     selected hedge has a higher CFaR than floating
      DEGENERATE_DISTRIBUTION  every unhedged outcome is identical
    """
    un = analysis.unhedged
    report = HedgeComparison(
        pair=pair,
        hedge_ratio=analysis.hedge_ratio,
        forward_rate=analysis.forward_rate,
        unhedged_mean=un.mean,
        unhedged_p5=un.p5,
        unhedged_cfar=un.cfar,
    )

    if analysis.selected is not None:
        sel = analysis.selected
        report.selected_mean = sel.hedged.mean
        report.selected_p5 = sel.hedged.p5
        report.selected_cfar = sel.hedged.cfar
        report.selected_risk_reduction_pct = sel.risk_reduction_pct
    if analysis.fully_hedged is not None:
        full = analysis.fully_hedged
        report.fully_hedged_mean = full.hedged.mean
        report.fully_hedged_p5 = full.hedged.p5
        report.fully_hedged_cfar = full.hedged.cfar
        report.fully_hedged_risk_reduction_pct = full.risk_reduction_pct

    if un.cfar < 0:
        report.flags.append("NEGATIVE_CFAR: unhedged p5 exceeds the mean")
    if report.selected_cfar is not None and report.selected_cfar > un.cfar:
        report.flags.append("HEDGE_INCREASES_RISK: selected hedge CFaR exceeds unhedged CFaR")
    if un.hist.counts[0] == un.sims:
        report.flags.append("DEGENERATE_DISTRIBUTION: all unhedged outcomes are identical")

    return report
