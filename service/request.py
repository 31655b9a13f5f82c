"""
Request schema for a CFaR run.

Field names accept both the snake_case attribute names and the camelCase keys
used by JSON callers (homeCcy, exposureCcy, forwardRate, hedgeRatio, ...).
Blank or null optional values fall back to their defaults: a missing forward
rate disables the hedged runs, a missing hedge ratio means 0.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.config import MONTHS_RANGE, SIMS_RANGE, SimulationConfig

DEFAULT_MONTHS = SimulationConfig.months
DEFAULT_SIMS = SimulationConfig.sims


def _blank(v) -> bool:
    return v is None or (isinstance(v, str) and v.strip() == "")


class CFaRRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, extra="ignore")

    home_ccy: str = Field(..., alias="homeCcy", min_length=3, max_length=3)
    exposure_ccy: str = Field(..., alias="exposureCcy", min_length=3, max_length=3)
    exposures: List[float]
    months: int = Field(DEFAULT_MONTHS, ge=MONTHS_RANGE[0], le=MONTHS_RANGE[1])
    sims: int = Field(DEFAULT_SIMS, ge=SIMS_RANGE[0], le=SIMS_RANGE[1])
    forward_rate: Optional[float] = Field(None, alias="forwardRate", gt=0)
    hedge_ratio: float = Field(0.0, alias="hedgeRatio", ge=0.0, le=1.0)
    hedge_tenor_months: Optional[int] = Field(None, alias="hedgeTenorMonths", ge=1)
    seed: Optional[int] = Field(None, ge=0)

    @field_validator("home_ccy", "exposure_ccy", mode="before")
    @classmethod
    def _normalise_ccy(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("months", mode="before")
    @classmethod
    def _default_months(cls, v):
        return DEFAULT_MONTHS if _blank(v) else v

    @field_validator("sims", mode="before")
    @classmethod
    def _default_sims(cls, v):
        return DEFAULT_SIMS if _blank(v) else v

    @field_validator("hedge_ratio", mode="before")
    @classmethod
    def _default_hedge_ratio(cls, v):
        return 0.0 if _blank(v) else v

    @field_validator("forward_rate", "hedge_tenor_months", "seed", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return None if _blank(v) else v

    @model_validator(mode="after")
    def _schedule_matches_horizon(self) -> "CFaRRequest":
        if len(self.exposures) != self.months:
            raise ValueError(f"exposures must be length {self.months}")
        return self

    @property
    def pair(self) -> str:
        return f"{self.home_ccy}{self.exposure_ccy}"
