"""
PM outputs — outcome summaries, histograms, and hedge decision support.
"""

from .aggregator import (
    Histogram,
    SimulationResult,
    build_histogram,
    nearest_rank_percentile,
    summarize_outcomes,
)
from .decisions import HedgeComparison, compare_hedges

__all__ = [
    "Histogram",
    "SimulationResult",
    "build_histogram",
    "nearest_rank_percentile",
    "summarize_outcomes",
    "HedgeComparison",
    "compare_hedges",
]
