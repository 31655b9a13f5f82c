from __future__ import annotations

from typing import Iterable, List

import numpy as np
import pandas as pd


def as_float_array(values: Iterable[float]) -> np.ndarray:
    """Copy `values` (list, tuple, Series, ndarray, generator) into a 1-D float64 array."""
    if not isinstance(values, (np.ndarray, list, tuple)) and not hasattr(values, "to_numpy"):
        values = list(values)
    return np.array(values, dtype=float).ravel()


def all_finite(values: np.ndarray) -> bool:
    return bool(np.all(np.isfinite(values)))


def frozen(arr: np.ndarray) -> np.ndarray:
    """Mark an array read-only so shared inputs can't be mutated downstream."""
    arr.setflags(write=False)
    return arr


def split_evenly(total: int, n_parts: int) -> List[int]:
    """Split `total` into at most `n_parts` sizes that differ by at most one."""
    n_parts = max(1, min(int(n_parts), int(total)))
    base, extra = divmod(int(total), n_parts)
    return [base + (1 if i < extra else 0) for i in range(n_parts)]


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
