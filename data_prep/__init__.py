"""
Data preparation — loading FX close histories, the in-memory pair dataset, validation.
"""

from .loader import load_fx_closes
from .fx_dataset import FxDataset, FxPairHistory
from .validators import (
    validate_closes,
    validate_history,
    validate_schedule,
    validate_simulation_inputs,
    validate_hedge_inputs,
)

__all__ = [
    "load_fx_closes",
    "FxDataset",
    "FxPairHistory",
    "validate_closes",
    "validate_history",
    "validate_schedule",
    "validate_simulation_inputs",
    "validate_hedge_inputs",
]
