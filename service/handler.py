"""
Request handling for CFaR runs: dataset lookup, engine call, response payload,
and the mapping of failures onto HTTP-style status codes.

The response keeps the unhedged numbers at the top level (mean, p5, cfar, hist)
and adds the per-scenario blocks `unhedged`, `selected`, `fullyHedged` and
`hedged`; the hedged blocks carry `riskReductionPct` against the unhedged run
and are null when no forward rate was supplied.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from core.config import SimulationConfig
from core.errors import CFaRError
from data_prep.fx_dataset import FxDataset, FxPairHistory
from engine.runner import CFaRAnalysis, run_cfar_analysis

from .request import CFaRRequest

logger = logging.getLogger(__name__)


def health() -> Dict[str, bool]:
    return {"ok": True}


def build_response(pair: str, spot: float, analysis: CFaRAnalysis) -> Dict[str, Any]:
    un = analysis.unhedged
    body: Dict[str, Any] = {
        "pair": pair,
        "spot": spot,
        "months": un.months,
        "sims": un.sims,
        "forwardRate": analysis.forward_rate,
        "hedgeRatio": analysis.hedge_ratio,
        "hedgeTenorMonths": analysis.hedge_tenor_months,
        "mean": un.mean,
        "p5": un.p5,
        "cfar": un.cfar,
        "hist": un.hist.to_dict(),
        "unhedged": un.to_dict(),
        "selected": None,
        "fullyHedged": None,
        "hedged": None,
    }
    if analysis.selected is not None:
        sel = analysis.selected.hedged
        body["selected"] = dict(sel.to_dict(), riskReductionPct=analysis.selected.risk_reduction_pct)
        body["fullyHedged"] = dict(
            analysis.fully_hedged.hedged.to_dict(),
            riskReductionPct=analysis.fully_hedged.risk_reduction_pct,
        )
        body["hedged"] = {
            "mean": sel.mean,
            "p5": sel.p5,
            "cfar": sel.cfar,
            "hist": sel.hist.to_dict(),
            "riskReductionPct": analysis.selected.risk_reduction_pct,
        }
    return body


def analyze_request(
    request: CFaRRequest,
    dataset: FxDataset,
    config: Optional[SimulationConfig] = None,
) -> Tuple[FxPairHistory, CFaRAnalysis]:
    """Look up the pair, derive returns and clamp bounds, run all scenarios."""
    cfg = config or SimulationConfig()
    if request.seed is not None:
        cfg = dataclasses.replace(cfg, seed=request.seed)

    history = dataset.get(request.home_ccy, request.exposure_ccy)
    clamp_lower, clamp_upper = history.clamp_bounds(cfg.clamp_lower_factor, cfg.clamp_upper_factor)

    analysis = run_cfar_analysis(
        history.spot,
        history.returns,
        request.exposures,
        hedge_ratio=request.hedge_ratio,
        forward_rate=request.forward_rate,
        hedge_tenor_months=request.hedge_tenor_months,
        months=request.months,
        sims=request.sims,
        clamp_lower=clamp_lower,
        clamp_upper=clamp_upper,
        config=cfg,
    )
    return history, analysis


def run_cfar_request(
    request: CFaRRequest,
    dataset: FxDataset,
    config: Optional[SimulationConfig] = None,
) -> Dict[str, Any]:
    history, analysis = analyze_request(request, dataset, config)
    return build_response(history.pair, history.spot, analysis)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def handle_cfar_request(
    payload: Mapping[str, Any],
    dataset: FxDataset,
    config: Optional[SimulationConfig] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Validate a raw JSON-like payload and run it.

    Returns (status, body): 200 with the response payload, 400 with
    {"error": ...} for invalid input or an unknown pair, 500 otherwise.
    """
    try:
        request = CFaRRequest.model_validate(payload)
        return 200, run_cfar_request(request, dataset, config)
    except ValidationError as exc:
        return 400, {"error": _validation_message(exc)}
    except CFaRError as exc:
        return 400, {"error": str(exc)}
    except Exception as exc:
        logger.exception("CFaR request failed")
        return 500, {"error": str(exc) or "Unknown error"}
