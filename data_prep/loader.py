from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

from core.utils import require_columns

FX_CLOSE_COLUMNS = ("pair", "date", "close")


def load_fx_closes(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a long-format FX history table: one row per pair per month.

    Required columns: pair, date, close. An optional `spot` column overrides the
    spot used for a pair (otherwise the last close is taken). `.xlsx` files are
    read with openpyxl, anything else as CSV.
    """
    path = Path(path)
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        df = pd.read_excel(path, engine="openpyxl")
    else:
        df = pd.read_csv(path)

    df.columns = [str(c).strip().lower() for c in df.columns]
    require_columns(df, FX_CLOSE_COLUMNS)

    df["pair"] = df["pair"].astype(str).str.strip().str.upper()
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df["close"] = pd.to_numeric(df["close"], errors="coerce")
    if "spot" in df.columns:
        df["spot"] = pd.to_numeric(df["spot"], errors="coerce")

    return df.sort_values(["pair", "date"]).reset_index(drop=True)
