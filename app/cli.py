"""
cfar-engine command line.

    cfar-engine pairs
    cfar-engine run --home GBP --exposure USD --amount 100000 --months 12 \
        --forward 1.27 --hedge-ratio 0.5
    cfar-engine run ... --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError

from core.config import SimulationConfig
from core.errors import CFaRError
from data_prep.fx_dataset import FxDataset
from distributions.returns import summarize_returns
from pm.decisions import compare_hedges
from service.handler import analyze_request, build_response
from service.request import CFaRRequest


def _parse_exposures(text: str) -> List[float]:
    return [float(x) for x in text.split(",") if x.strip()]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cfar-engine", description="Cash-Flow-at-Risk engine")
    parser.add_argument("--data", type=str, default=None,
                        help="CSV/XLSX of monthly closes (pair,date,close); defaults to the bundled sample")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------------
    # pairs
    # ------------------------------------------------------------------
    sub.add_parser("pairs", help="List the currency pairs in the dataset")

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------
    p_run = sub.add_parser("run", help="Run unhedged / selected / fully-hedged CFaR for one pair")
    p_run.add_argument("--home", required=True, help="Home currency, e.g. GBP")
    p_run.add_argument("--exposure", required=True, help="Exposure currency, e.g. USD")
    sched = p_run.add_mutually_exclusive_group(required=True)
    sched.add_argument("--amount", type=float, help="Flat monthly exposure")
    sched.add_argument("--exposures", type=_parse_exposures,
                       help="Comma-separated monthly exposures (length must equal --months)")
    p_run.add_argument("--months", type=int, default=None)
    p_run.add_argument("--sims", type=int, default=5000)
    p_run.add_argument("--forward", type=float, default=None, help="All-in forward rate")
    p_run.add_argument("--hedge-ratio", type=float, default=0.0)
    p_run.add_argument("--tenor", type=int, default=None, help="Hedge tenor in months")
    p_run.add_argument("--seed", type=int, default=None)
    p_run.add_argument("--workers", type=int, default=1, help="Parallel path shards")
    p_run.add_argument("--json", action="store_true", help="Print the full response payload as JSON")
    p_run.add_argument("--bands", action="store_true", help="Also print per-month simulated rate bands")
    return parser


def _load_dataset(path: Optional[str]) -> FxDataset:
    return FxDataset.sample() if path is None else FxDataset.from_file(path)


def _cmd_pairs(dataset: FxDataset) -> int:
    with pd.option_context("display.width", 120):
        print(dataset.summary().to_string(index=False))
    return 0


def _cmd_run(args, dataset: FxDataset) -> int:
    if args.amount is not None:
        months = args.months if args.months is not None else 12
        exposures = [args.amount] * months
    else:
        exposures = args.exposures
        months = args.months if args.months is not None else len(exposures)

    try:
        request = CFaRRequest(
            homeCcy=args.home,
            exposureCcy=args.exposure,
            exposures=exposures,
            months=months,
            sims=args.sims,
            forwardRate=args.forward,
            hedgeRatio=args.hedge_ratio,
            hedgeTenorMonths=args.tenor,
            seed=args.seed,
        )
        config = SimulationConfig(n_workers=args.workers)
        history, analysis = analyze_request(request, dataset, config)
    except (ValidationError, CFaRError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(build_response(history.pair, history.spot, analysis), indent=2))
        return 0

    report = compare_hedges(analysis, pair=history.pair)
    print(f"{history.pair}  spot={history.spot:.4f}  months={request.months}  sims={request.sims}")
    print(summarize_returns(history.returns))
    with pd.option_context("display.width", 120, "display.float_format", "{:,.2f}".format):
        print(report.to_dataframe().to_string(index=False))
    for flag in report.flags:
        print(f"! {flag}")
    if args.bands:
        with pd.option_context("display.width", 120, "display.float_format", "{:.4f}".format):
            print(analysis.paths.summary().to_string(index=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd is None:
        parser.print_help()
        return 1

    dataset = _load_dataset(args.data)
    if args.cmd == "pairs":
        return _cmd_pairs(dataset)
    return _cmd_run(args, dataset)


if __name__ == "__main__":
    sys.exit(main())
