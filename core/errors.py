"""
Error taxonomy for the CFaR engine.

Every check happens before any simulation work starts, so a caller either gets
a complete result or one of these exceptions — never a partial result.
They subclass ValueError so existing `except ValueError` handlers keep working.
"""

from __future__ import annotations


class CFaRError(ValueError):
    """Base class for all precondition violations raised by the engine."""


class InvalidHistory(CFaRError):
    """Price history or return series too short, non-finite or non-positive."""


class InvalidSchedule(CFaRError):
    """Exposure schedule has the wrong length or contains non-finite values."""


class InvalidRange(CFaRError):
    """A scalar input (months, sims, hedge ratio, forward rate, ...) is out of bounds."""


class UnknownPair(CFaRError):
    """No FX history is loaded for the requested currency pair."""

    def __init__(self, pair: str):
        super().__init__(f"No FX data for pair {pair}")
        self.pair = pair
