"""
Tests for the in-memory FX dataset and its bundled sample.
"""

import numpy as np
import pandas as pd
import pytest

from core.errors import UnknownPair
from data_prep.fx_dataset import FxDataset


def _frame(rows):
    df = pd.DataFrame(rows, columns=["pair", "date", "close"])
    df["date"] = pd.to_datetime(df["date"])
    return df


def test_sample_dataset_pairs(sample_dataset):
    assert "GBPUSD" in sample_dataset
    assert len(sample_dataset) == 6
    assert sample_dataset.exposure_currencies("GBP") == ["EUR", "USD"]
    assert "JPY" in sample_dataset.currencies()


def test_get_pair_history(sample_dataset):
    h = sample_dataset.get("gbp", "usd")
    assert h.pair == "GBPUSD"
    assert h.home_ccy == "GBP"
    assert h.exposure_ccy == "USD"
    assert len(h.closes) == 36
    assert h.spot == pytest.approx(h.closes[-1])
    assert h.returns.size == 35
    lo, hi = h.clamp_bounds()
    assert lo == pytest.approx(h.closes.min() * 0.85)
    assert hi == pytest.approx(h.closes.max() * 1.15)


def test_unknown_pair(sample_dataset):
    with pytest.raises(UnknownPair, match="No FX data for pair GBPCHF"):
        sample_dataset.get("GBP", "CHF")


def test_bad_rows_dropped_and_short_pairs_skipped(caplog):
    ds = FxDataset.from_frame(_frame([
        ("GBPUSD", "2024-01-01", 1.25),
        ("GBPUSD", "2024-02-01", np.nan),
        ("GBPUSD", "2024-03-01", 1.27),
        ("EURUSD", "2024-01-01", 1.08),
    ]))
    assert ds.pairs() == ["GBPUSD"]
    assert np.allclose(ds.get("GBP", "USD").closes, [1.25, 1.27])
    assert "fewer than 2 usable closes" in caplog.text


def test_spot_column_overrides_last_close():
    df = _frame([("GBPUSD", "2024-01-01", 1.25), ("GBPUSD", "2024-02-01", 1.27)])
    df["spot"] = [np.nan, 1.30]
    assert FxDataset.from_frame(df).get("GBP", "USD").spot == 1.30


def test_summary_frame(sample_dataset):
    s = sample_dataset.summary()
    assert list(s["Pair"]) == sample_dataset.pairs()
    assert (s["Closes"] == 36).all()
