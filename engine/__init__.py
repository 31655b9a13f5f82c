"""
CFaR engine — rolling forward-hedge ledger + the runner that composes paths, hedging and summaries.
"""

from .hedging import HedgeBook, HedgeContract, HedgeLedger, floating_outcomes
from .runner import (
    CFaRAnalysis,
    HedgedSimulationResult,
    apply_hedging_to_paths,
    risk_reduction_pct,
    run_cfar_analysis,
    simulate_cfar,
    simulate_hedged_cfar,
)

__all__ = [
    "HedgeBook",
    "HedgeContract",
    "HedgeLedger",
    "floating_outcomes",
    "CFaRAnalysis",
    "HedgedSimulationResult",
    "apply_hedging_to_paths",
    "risk_reduction_pct",
    "run_cfar_analysis",
    "simulate_cfar",
    "simulate_hedged_cfar",
]
