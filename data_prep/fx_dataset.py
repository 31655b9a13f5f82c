"""
In-memory FX dataset: one monthly close history (and a spot) per currency pair.

Pairs are keyed as HOME + EXPOSURE, e.g. "GBPUSD" is the history used when the
home currency is GBP and the exposure is in USD. The engine only ever sees the
closes and spot pulled out of here; nothing in this module simulates anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from core.errors import UnknownPair
from core.utils import frozen
from distributions.returns import closes_to_returns, historical_clamp_bounds

from .loader import load_fx_closes

logger = logging.getLogger(__name__)

SAMPLE_DATA_PATH = Path(__file__).resolve().parent / "sample_data" / "fx_monthly_closes.csv"


@dataclass(frozen=True)
class FxPairHistory:
    """Monthly closes for one pair, oldest first, plus the spot to simulate from."""
    pair: str
    spot: float
    closes: np.ndarray
    dates: Optional[pd.DatetimeIndex] = None

    @property
    def home_ccy(self) -> str:
        return self.pair[:3]

    @property
    def exposure_ccy(self) -> str:
        return self.pair[3:6]

    @property
    def returns(self) -> np.ndarray:
        return closes_to_returns(self.closes)

    def clamp_bounds(
        self, lower_factor: float = 0.85, upper_factor: float = 1.15
    ) -> Tuple[float, float]:
        return historical_clamp_bounds(self.closes, lower_factor, upper_factor)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({"date": self.dates, "close": self.closes})


class FxDataset:
    """
    Lookup table of FxPairHistory objects.

    Usage:
        ds = FxDataset.sample()
        hist = ds.get("GBP", "USD")
        hist.returns, hist.spot, hist.clamp_bounds()
    """

    def __init__(self, histories: Dict[str, FxPairHistory]):
        self._histories = dict(histories)

    def __len__(self) -> int:
        return len(self._histories)

    def __contains__(self, pair: str) -> bool:
        return pair in self._histories

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "FxDataset":
        """Build from a long-format frame as produced by load_fx_closes()."""
        histories: Dict[str, FxPairHistory] = {}
        for pair, grp in df.groupby("pair", sort=True):
            valid = grp.dropna(subset=["close"])
            valid = valid[valid["close"] > 0]
            n_dropped = len(grp) - len(valid)
            if n_dropped:
                logger.warning("%s: dropped %d rows with missing or non-positive closes", pair, n_dropped)
            if len(valid) < 2:
                logger.warning("%s: fewer than 2 usable closes, pair skipped", pair)
                continue

            closes = frozen(valid["close"].to_numpy(dtype=float))
            spot = float(closes[-1])
            if "spot" in valid.columns and valid["spot"].notna().any():
                spot = float(valid["spot"].dropna().iloc[-1])

            histories[str(pair)] = FxPairHistory(
                pair=str(pair),
                spot=spot,
                closes=closes,
                dates=pd.DatetimeIndex(valid["date"]),
            )
        logger.debug("Loaded FX dataset with %d pairs", len(histories))
        return cls(histories)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FxDataset":
        return cls.from_frame(load_fx_closes(path))

    @classmethod
    def sample(cls) -> "FxDataset":
        """Illustrative bundled dataset (not market data) for demos and tests."""
        return cls.from_file(SAMPLE_DATA_PATH)

    def get(self, home_ccy: str, exposure_ccy: str) -> FxPairHistory:
        key = f"{home_ccy}{exposure_ccy}".upper()
        try:
            return self._histories[key]
        except KeyError:
            raise UnknownPair(key) from None

    def pairs(self) -> List[str]:
        return sorted(self._histories)

    def currencies(self) -> List[str]:
        ccys = set()
        for pair in self._histories:
            ccys.update((pair[:3], pair[3:6]))
        return sorted(ccys)

    def exposure_currencies(self, home_ccy: str) -> List[str]:
        """Exposure currencies that have a history against `home_ccy`."""
        home = home_ccy.upper()
        return [p[3:6] for p in self.pairs() if p[:3] == home]

    def summary(self) -> pd.DataFrame:
        rows = []
        for pair in self.pairs():
            h = self._histories[pair]
            rows.append({
                "Pair": pair,
                "Spot": h.spot,
                "Closes": len(h.closes),
                "Min": float(np.min(h.closes)),
                "Max": float(np.max(h.closes)),
                "First": h.dates[0] if h.dates is not None and len(h.dates) else None,
                "Last": h.dates[-1] if h.dates is not None and len(h.dates) else None,
            })
        return pd.DataFrame(rows)
