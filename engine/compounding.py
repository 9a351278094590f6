"""
Deterministic month-by-month compounding for a single pocket.

Recurrences (r = annual_rate / 12, i = inflation_rate / 12):
  nominal(m) = nominal(m-1) * (1 + r) + monthly
  real(m)    = real(m-1) * (1 + r) / (1 + i) + monthly / (1 + i)
  contrib(m) = initial + monthly * m
with nominal(0) = real(0) = initial.

Full precision throughout; formatting/rounding is the caller's job.
"""

from __future__ import annotations

from typing import Tuple

import pandas as pd

from core.schema import ProjectionPoint
from core.utils import annual_to_monthly_rate, month_labels, require_finite


def _check_rate(name: str, rate: float) -> float:
    rate = require_finite(name, rate)
    if rate <= -1.0:
        raise ValueError(f"{name} must be greater than -100%, got {rate}")
    return rate


def project(
    initial: float,
    monthly_contribution: float,
    annual_rate: float,
    years: int,
    inflation_rate: float = 0.0,
    *,
    as_of_date: pd.Timestamp,
) -> Tuple[ProjectionPoint, ...]:
    """
    Project one pocket for `years` years (years * 12 points, month 1 first).

    Parameters
    ----------
    initial : float
        Starting balance (month 0).
    monthly_contribution : float
        Added at the end of every month; negative values model withdrawals.
        Balances are not floored at zero.
    annual_rate : float
        Expected annual return as a fraction (0.06 = 6%).
    years : int
        Horizon. years <= 0 gives an empty projection.
    inflation_rate : float
        Annual inflation used for the real (constant purchasing power) balance.
    as_of_date : pd.Timestamp
        Anchor for month labels; month m is labelled as_of_date + m months.
    """
    initial = require_finite("initial", initial)
    monthly = require_finite("monthly_contribution", monthly_contribution)
    annual_rate = _check_rate("annual_rate", annual_rate)
    inflation_rate = _check_rate("inflation_rate", inflation_rate)

    n_months = int(years) * 12
    if n_months <= 0:
        return ()

    r_m = annual_to_monthly_rate(annual_rate)
    infl_m = annual_to_monthly_rate(inflation_rate)
    labels = month_labels(as_of_date, n_months)

    nominal = initial
    real = initial
    out = []
    for m in range(1, n_months + 1):
        nominal = nominal * (1 + r_m) + monthly
        real = (real * (1 + r_m)) / (1 + infl_m) + monthly / (1 + infl_m)
        out.append(ProjectionPoint(
            month=m,
            label=labels[m - 1],
            nominal=nominal,
            real=real,
            contribution=initial + monthly * m,
        ))
    return tuple(out)
