"""
CFaR runner — orchestrates bootstrap paths through the hedge ledger and summariser.

Three run modes:
  1. Unhedged only:      no forward rate available; every month floats at the simulated rate
  2. Selected hedge:     one hedge ratio applied with the disclosed all-in forward rate
  3. Fully hedged:       hedge ratio = 1, same forward rate

run_cfar_analysis() produces all three from ONE PathSet so that the unhedged,
selected and fully-hedged distributions (and the risk reduction between them)
are compared on identical simulated futures. The single-mode helpers
simulate_cfar() / simulate_hedged_cfar() draw their own paths per call.

All inputs are validated before any path is drawn; a run either returns a
complete result or raises one of the core.errors exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import numpy as np

from core.config import SimulationConfig
from core.errors import InvalidSchedule
from core.utils import as_float_array
from data_prep.validators import validate_hedge_inputs, validate_schedule, validate_simulation_inputs
from distributions.draws import DrawProvider
from distributions.sampler import BootstrapPathSampler, PathSet
from pm.aggregator import SimulationResult, summarize_outcomes

from .hedging import HedgeLedger, floating_outcomes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HedgedSimulationResult:
    unhedged: SimulationResult
    hedged: SimulationResult
    hedge_ratio: float
    forward_rate: float
    risk_reduction_pct: float

    def to_dict(self) -> Dict:
        return {
            "unhedged": self.unhedged.to_dict(),
            "hedged": self.hedged.to_dict(),
            "hedgeRatio": self.hedge_ratio,
            "forwardRate": self.forward_rate,
            "riskReductionPct": self.risk_reduction_pct,
        }


@dataclass(frozen=True)
class CFaRAnalysis:
    """
    Everything one request produces.

    selected / fully_hedged are None when no forward rate was supplied.
    outcomes holds the raw per-path totals keyed "unhedged", "selected", "fully_hedged".
    """
    unhedged: SimulationResult
    selected: Optional[HedgedSimulationResult]
    fully_hedged: Optional[HedgedSimulationResult]
    hedge_ratio: float
    forward_rate: Optional[float]
    hedge_tenor_months: int
    paths: PathSet
    outcomes: Dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def has_hedge(self) -> bool:
        return self.selected is not None


def risk_reduction_pct(unhedged: SimulationResult, hedged: SimulationResult) -> float:
    """Relative CFaR reduction in percent; 0 when the unhedged CFaR is not positive."""
    if unhedged.cfar > 0:
        return (1.0 - hedged.cfar / unhedged.cfar) * 100.0
    return 0.0


def _horizon(exposures: Iterable[float], months: Optional[int]):
    """Exposures as an array, and the horizon (len(exposures) unless given)."""
    exp = as_float_array(exposures)
    if exp.size == 0:
        raise InvalidSchedule("exposures must not be empty")
    return exp, (exp.size if months is None else months)


def _sampler(
    spot: float,
    monthly_returns: Iterable[float],
    exposures: Iterable[float],
    *,
    months: int,
    sims: int,
    clamp_lower: Optional[float],
    clamp_upper: Optional[float],
    draws: Optional[DrawProvider],
    cfg: SimulationConfig,
):
    """Validate the simulation inputs and build (sampler, exposures) without drawing anything."""
    validate_simulation_inputs(
        spot=spot, months=months, sims=sims,
        clamp_lower=clamp_lower, clamp_upper=clamp_upper,
    )
    exp = validate_schedule(exposures, months)
    sampler = BootstrapPathSampler(
        spot,
        monthly_returns,
        months=months,
        sims=sims,
        clamp_lower=clamp_lower,
        clamp_upper=clamp_upper,
        draws=draws,
        seed=cfg.seed,
        n_workers=cfg.n_workers,
    )
    return sampler, exp


def apply_hedging_to_paths(
    paths: PathSet,
    exposures: Iterable[float],
    *,
    hedge_ratio: float,
    forward_rate: float,
    hedge_tenor_months: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> HedgedSimulationResult:
    """Run the hedge ledger over every path and summarise both outcome sets."""
    cfg = config or SimulationConfig()
    tenor = cfg.tenor_for(paths.months) if hedge_tenor_months is None else hedge_tenor_months
    ledger = HedgeLedger(
        exposures,
        hedge_ratio=hedge_ratio,
        forward_rate=forward_rate,
        hedge_tenor_months=tenor,
    )
    unhedged_out, hedged_out = ledger.run(paths)
    return _hedged_result(unhedged_out, hedged_out, ledger, cfg)


def _hedged_result(
    unhedged_out: np.ndarray,
    hedged_out: np.ndarray,
    ledger: HedgeLedger,
    cfg: SimulationConfig,
) -> HedgedSimulationResult:
    unhedged = summarize_outcomes(unhedged_out, months=ledger.months, percentile=cfg.percentile, bins=cfg.hist_bins)
    hedged = summarize_outcomes(hedged_out, months=ledger.months, percentile=cfg.percentile, bins=cfg.hist_bins)
    return HedgedSimulationResult(
        unhedged=unhedged,
        hedged=hedged,
        hedge_ratio=ledger.hedge_ratio,
        forward_rate=ledger.forward_rate,
        risk_reduction_pct=risk_reduction_pct(unhedged, hedged),
    )


def simulate_cfar(
    spot: float,
    monthly_returns: Iterable[float],
    exposures: Iterable[float],
    *,
    months: Optional[int] = None,
    sims: Optional[int] = None,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
    draws: Optional[DrawProvider] = None,
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """Unhedged CFaR: every month's exposure converts at the simulated rate."""
    cfg = config or SimulationConfig()
    exposures, months = _horizon(exposures, months)
    sims = cfg.sims if sims is None else sims

    sampler, exp = _sampler(
        spot, monthly_returns, exposures,
        months=months, sims=sims, clamp_lower=clamp_lower, clamp_upper=clamp_upper,
        draws=draws, cfg=cfg,
    )
    paths = sampler.sample()
    result = summarize_outcomes(
        floating_outcomes(paths, exp), months=months, percentile=cfg.percentile, bins=cfg.hist_bins
    )
    logger.info("Unhedged CFaR: %d sims x %d months, mean=%.2f cfar=%.2f", sims, months, result.mean, result.cfar)
    return result


def simulate_hedged_cfar(
    spot: float,
    monthly_returns: Iterable[float],
    exposures: Iterable[float],
    *,
    hedge_ratio: float,
    forward_rate: float,
    hedge_tenor_months: Optional[int] = None,
    months: Optional[int] = None,
    sims: Optional[int] = None,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
    draws: Optional[DrawProvider] = None,
    config: Optional[SimulationConfig] = None,
) -> HedgedSimulationResult:
    """Draw a fresh PathSet and apply one hedge program to it."""
    cfg = config or SimulationConfig()
    exposures, months = _horizon(exposures, months)
    sims = cfg.sims if sims is None else sims
    tenor = cfg.tenor_for(months) if hedge_tenor_months is None else hedge_tenor_months

    sampler, exp = _sampler(
        spot, monthly_returns, exposures,
        months=months, sims=sims, clamp_lower=clamp_lower, clamp_upper=clamp_upper,
        draws=draws, cfg=cfg,
    )
    ledger = HedgeLedger(exp, hedge_ratio=hedge_ratio, forward_rate=forward_rate, hedge_tenor_months=tenor)
    unhedged_out, hedged_out = ledger.run(sampler.sample())
    return _hedged_result(unhedged_out, hedged_out, ledger, cfg)


def run_cfar_analysis(
    spot: float,
    monthly_returns: Iterable[float],
    exposures: Iterable[float],
    *,
    hedge_ratio: float = 0.0,
    forward_rate: Optional[float] = None,
    hedge_tenor_months: Optional[int] = None,
    months: Optional[int] = None,
    sims: Optional[int] = None,
    clamp_lower: Optional[float] = None,
    clamp_upper: Optional[float] = None,
    draws: Optional[DrawProvider] = None,
    config: Optional[SimulationConfig] = None,
) -> CFaRAnalysis:
    """
    Unhedged, selected-ratio and fully-hedged CFaR over one shared PathSet.

    Parameters
    ----------
    spot : float
        Current rate (home currency per unit of exposure currency)
    monthly_returns : array-like
        Empirical simple monthly returns to bootstrap from
    exposures : array-like
        Foreign-currency notional due each month, length == months
    hedge_ratio : float
        Share of each month's exposure locked forward, in [0, 1]
    forward_rate : float, optional
        Disclosed all-in forward rate; None skips both hedged runs
    hedge_tenor_months : int, optional
        Months between opening and settling each hedge layer (default: months)
    months : int, optional
        Horizon; defaults to len(exposures)

    Returns
    -------
    CFaRAnalysis with the three summaries, the shared paths and the raw outcomes.
    """
    cfg = config or SimulationConfig()
    exposures, months = _horizon(exposures, months)
    sims = cfg.sims if sims is None else sims
    tenor = cfg.tenor_for(months) if hedge_tenor_months is None else hedge_tenor_months

    # Validate everything before drawing a single path
    validate_hedge_inputs(hedge_ratio=hedge_ratio, forward_rate=forward_rate, hedge_tenor_months=tenor)
    sampler, exp = _sampler(
        spot, monthly_returns, exposures,
        months=months, sims=sims, clamp_lower=clamp_lower, clamp_upper=clamp_upper,
        draws=draws, cfg=cfg,
    )

    paths = sampler.sample()
    unhedged_out = floating_outcomes(paths, exp)
    unhedged = summarize_outcomes(unhedged_out, months=months, percentile=cfg.percentile, bins=cfg.hist_bins)
    outcomes: Dict[str, np.ndarray] = {"unhedged": unhedged_out}

    selected = fully_hedged = None
    if forward_rate is not None:
        for key, ratio in (("selected", hedge_ratio), ("fully_hedged", 1.0)):
            ledger = HedgeLedger(exp, hedge_ratio=ratio, forward_rate=forward_rate, hedge_tenor_months=tenor)
            _, hedged_out = ledger.run(paths)
            outcomes[key] = hedged_out
            hedged = summarize_outcomes(hedged_out, months=months, percentile=cfg.percentile, bins=cfg.hist_bins)
            result = HedgedSimulationResult(
                unhedged=unhedged,
                hedged=hedged,
                hedge_ratio=float(ratio),
                forward_rate=float(forward_rate),
                risk_reduction_pct=risk_reduction_pct(unhedged, hedged),
            )
            if key == "selected":
                selected = result
            else:
                fully_hedged = result

    logger.info(
        "CFaR analysis: %d sims x %d months, unhedged cfar=%.2f, hedged=%s",
        sims, months, unhedged.cfar,
        "n/a" if selected is None else f"{selected.hedged.cfar:.2f} ({selected.risk_reduction_pct:.1f}% reduction)",
    )

    return CFaRAnalysis(
        unhedged=unhedged,
        selected=selected,
        fully_hedged=fully_hedged,
        hedge_ratio=float(hedge_ratio),
        forward_rate=None if forward_rate is None else float(forward_rate),
        hedge_tenor_months=int(tenor),
        paths=paths,
        outcomes=outcomes,
    )
