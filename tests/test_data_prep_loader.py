"""
Tests for loading FX close tables from CSV / XLSX.
"""

import pandas as pd
import pytest

from data_prep.loader import load_fx_closes


def _write_csv(tmp_path, text):
    path = tmp_path / "closes.csv"
    path.write_text(text)
    return path


def test_load_csv_normalises_columns_and_pairs(tmp_path):
    path = _write_csv(tmp_path, (
        "Pair, Date ,Close\n"
        "gbpusd,2024-02-01,1.27\n"
        "gbpusd,2024-01-01,1.26\n"
        "EURUSD,2024-01-01,1.09\n"
    ))
    df = load_fx_closes(path)
    assert list(df.columns) == ["pair", "date", "close"]
    assert list(df["pair"]) == ["EURUSD", "GBPUSD", "GBPUSD"]
    # sorted by date within pair
    assert list(df["close"]) == [1.09, 1.26, 1.27]
    assert pd.api.types.is_datetime64_any_dtype(df["date"])


def test_bad_values_coerced_to_nan(tmp_path):
    path = _write_csv(tmp_path, "pair,date,close\nGBPUSD,2024-01-01,abc\nGBPUSD,2024-02-01,1.2\n")
    df = load_fx_closes(path)
    assert df["close"].isna().sum() == 1


def test_missing_column_rejected(tmp_path):
    path = _write_csv(tmp_path, "pair,date\nGBPUSD,2024-01-01\n")
    with pytest.raises(ValueError, match="close"):
        load_fx_closes(path)


def test_load_xlsx(tmp_path):
    path = tmp_path / "closes.xlsx"
    pd.DataFrame({
        "pair": ["GBPUSD", "GBPUSD"],
        "date": ["2024-01-01", "2024-02-01"],
        "close": [1.26, 1.27],
        "spot": [None, 1.28],
    }).to_excel(path, index=False, engine="openpyxl")
    df = load_fx_closes(path)
    assert len(df) == 2
    assert df["spot"].iloc[-1] == 1.28
