"""
Hedge Ledger — rolling forward-hedge bookkeeping applied to simulated rate paths.

For each path the ledger walks the horizon month by month and keeps two running
totals of home-currency cash:
  - unhedged: every month's exposure converts at the realised rate path[t+1]
  - hedged:   a hedge_ratio share of each month's exposure was locked earlier by a
              forward contract; the rest converts at the realised rate

Hedge program (one new layer per month):
  forward_factor = forward_rate / path[0]
  month t:
    1. if t + tenor < months: open a contract settling at t + tenor,
       locked at path[t] * forward_factor for exposures[t + tenor] * hedge_ratio
    2. settle every contract due at t:   hedged += notional * locked_rate
    3. floating share:                   hedged += exposures[t] * (1 - hedge_ratio) * path[t+1]
    4. unhedged:                         unhedged += exposures[t] * path[t+1]

The locked rate is quoted off the *current* simulated spot scaled by the
disclosed forward-to-spot ratio, not the original quote, so each layer follows
the path. With tenor >= months nothing is ever opened and the hedged total is
just the floating share.

Open contracts sit in buckets indexed by settle month (like a recovery bucket):
settlement pops one bucket instead of scanning the book. All paths of a PathSet
are processed together, one row per path; rows never interact, so each path
still owns its own locked rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np

from core.errors import InvalidRange, InvalidSchedule
from core.utils import as_float_array
from data_prep.validators import validate_hedge_inputs, validate_schedule
from distributions.sampler import PathSet


@dataclass(frozen=True)
class HedgeContract:
    """A forward opened for `settle_month`; locked_rate holds one rate per path."""
    settle_month: int
    locked_rate: np.ndarray  # shape (n_paths,)
    notional: float

    def cashflow(self) -> np.ndarray:
        return self.notional * self.locked_rate


class HedgeBook:
    """Currently-open contracts, bucketed by settle month."""

    def __init__(self, months: int):
        self._buckets: List[List[HedgeContract]] = [[] for _ in range(months + 1)]
        self._n_open = 0

    def __len__(self) -> int:
        return self._n_open

    @property
    def is_empty(self) -> bool:
        return self._n_open == 0

    def open(self, contract: HedgeContract) -> None:
        if not 0 <= contract.settle_month < len(self._buckets):
            raise ValueError(f"settle month {contract.settle_month} is outside the book")
        self._buckets[contract.settle_month].append(contract)
        self._n_open += 1

    def settle(self, month: int) -> List[HedgeContract]:
        """Remove and return every contract due at `month`."""
        due = self._buckets[month]
        self._buckets[month] = []
        self._n_open -= len(due)
        return due

    def open_contracts(self) -> List[HedgeContract]:
        return [c for bucket in self._buckets for c in bucket]


def _as_spot_matrix(paths: Union[PathSet, np.ndarray, Iterable[float]]) -> np.ndarray:
    if isinstance(paths, PathSet):
        return paths.spots
    return np.atleast_2d(np.asarray(paths, dtype=float))


def floating_outcomes(
    paths: Union[PathSet, np.ndarray],
    exposures: Iterable[float],
) -> np.ndarray:
    """Unhedged total per path: sum over t of exposures[t] * path[t+1]."""
    spots = _as_spot_matrix(paths)
    exp = validate_schedule(exposures, spots.shape[1] - 1)
    total = np.zeros(spots.shape[0], dtype=float)
    for t in range(exp.size):
        total += exp[t] * spots[:, t + 1]
    return total


class HedgeLedger:
    """
    Applies one hedge program (ratio, forward, tenor) to rate paths.

    Usage:
        ledger = HedgeLedger(exposures, hedge_ratio=0.5, forward_rate=1.27, hedge_tenor_months=3)
        unhedged, hedged = ledger.run(paths)          # arrays, one entry per path
        u, h = ledger.run_path(paths.path(0))         # floats, single path
    """

    def __init__(
        self,
        exposures: Iterable[float],
        *,
        hedge_ratio: float,
        forward_rate: float,
        hedge_tenor_months: Optional[int] = None,
    ):
        exp = as_float_array(exposures)
        self.months = int(exp.size)
        if self.months == 0:
            raise InvalidSchedule("exposures must not be empty")
        self.exposures = validate_schedule(exp, self.months)
        if forward_rate is None:
            raise InvalidRange("forwardRate is required for hedging")
        validate_hedge_inputs(
            hedge_ratio=hedge_ratio,
            forward_rate=forward_rate,
            hedge_tenor_months=hedge_tenor_months,
        )
        self.hedge_ratio = float(hedge_ratio)
        self.forward_rate = float(forward_rate)
        self.hedge_tenor_months = self.months if hedge_tenor_months is None else int(hedge_tenor_months)

    def run(self, paths: Union[PathSet, np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        """Return (unhedged, hedged) totals, one entry per path."""
        spots = _as_spot_matrix(paths)
        if spots.shape[1] != self.months + 1:
            raise InvalidSchedule(
                f"exposures must be length {spots.shape[1] - 1} to match the paths"
            )

        n_paths = spots.shape[0]
        months = self.months
        tenor = self.hedge_tenor_months
        ratio = self.hedge_ratio
        forward_factor = self.forward_rate / spots[:, 0]

        book = HedgeBook(months)
        total_unhedged = np.zeros(n_paths, dtype=float)
        total_hedged = np.zeros(n_paths, dtype=float)

        for t in range(months):
            exp = self.exposures[t]
            entry_spot = spots[:, t]
            settle_spot = spots[:, t + 1]

            target = t + tenor
            if target < months:
                book.open(HedgeContract(
                    settle_month=target,
                    locked_rate=entry_spot * forward_factor,
                    notional=self.exposures[target] * ratio,
                ))

            hedged_cashflow = np.zeros(n_paths, dtype=float)
            for contract in book.settle(t):
                hedged_cashflow += contract.cashflow()

            total_hedged += hedged_cashflow + exp * (1.0 - ratio) * settle_spot
            total_unhedged += exp * settle_spot

        if not book.is_empty:
            raise RuntimeError(f"{len(book)} hedge contracts left unsettled")

        return total_unhedged, total_hedged

    def run_path(self, path: Iterable[float]) -> Tuple[float, float]:
        unhedged, hedged = self.run(as_float_array(path).reshape(1, -1))
        return float(unhedged[0]), float(hedged[0])
