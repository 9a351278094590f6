"""
Projection and price-feed configuration.
Engine inputs live in ProjectionConfig; the live price source in PriceFeedSettings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Tuple

import pandas as pd
from dotenv import load_dotenv

RateMode = Literal["auto", "manual"]

# Allocation chart colours, assigned by position.
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#4C6A92",  # steel blue
    "#C0504D",  # muted red
    "#9BBB59",  # olive green
    "#8064A2",  # muted purple
    "#F2C200",  # muted gold
    "#4F81BD",  # corporate blue
    "#D79E9C",  # soft red-gray
    "#8C9CB1",  # soft gray-blue
)


@dataclass(frozen=True)
class ProjectionConfig:
    as_of_date: pd.Timestamp
    years: int = 20
    inflation_rate: float = 0.0

    # global rate shown next to the projection; per-pocket rates drive the math
    rate_mode: RateMode = "auto"
    manual_rate: float = 0.06

    # KPI cards are always computed at these marks, whatever the chart horizon
    kpi_horizons: Tuple[int, ...] = (5, 10, 20)

    def __post_init__(self):
        if int(self.years) < 0:
            raise ValueError(f"years must be >= 0, got {self.years}")
        if self.rate_mode not in ("auto", "manual"):
            raise ValueError(f"Unknown rate mode: {self.rate_mode!r}")
        if any(int(h) <= 0 for h in self.kpi_horizons):
            raise ValueError(f"KPI horizons must be positive: {self.kpi_horizons}")

    @property
    def n_months(self) -> int:
        return int(self.years) * 12


@dataclass(frozen=True)
class PriceFeedSettings:
    asset_id: str = "bitcoin"
    currency: str = "eur"
    url: str = "https://api.coingecko.com/api/v3/simple/price"
    refresh_seconds: float = 20.0
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "PriceFeedSettings":
        """Read WEALTH_PRICE_* variables (a local .env file is loaded first)."""
        load_dotenv()
        defaults = cls()
        return cls(
            asset_id=os.environ.get("WEALTH_PRICE_ASSET", defaults.asset_id),
            currency=os.environ.get("WEALTH_PRICE_CURRENCY", defaults.currency).lower(),
            url=os.environ.get("WEALTH_PRICE_URL", defaults.url),
            refresh_seconds=float(
                os.environ.get("WEALTH_PRICE_REFRESH_SECONDS", defaults.refresh_seconds)
            ),
            timeout_seconds=float(
                os.environ.get("WEALTH_PRICE_TIMEOUT_SECONDS", defaults.timeout_seconds)
            ),
        )
