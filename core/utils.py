from __future__ import annotations

import math
from typing import Iterable, List

import pandas as pd
from babel.dates import format_date
from dateutil.relativedelta import relativedelta

MONTH_LABEL_LOCALE = "fr_FR"


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def finite_or_zero(x) -> float:
    """Normalize missing / unparseable / non-finite numerics to 0.0."""
    if x is None:
        return 0.0
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def require_finite(name: str, x: float) -> float:
    v = float(x)
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite, got {x!r}")
    return v


def annual_to_monthly_rate(annual_rate: float) -> float:
    """Nominal annual rate compounded monthly: r / 12 (not the effective 12th root)."""
    return float(annual_rate) / 12.0


def month_label(d: pd.Timestamp, locale: str = MONTH_LABEL_LOCALE) -> str:
    """Short month + 2-digit year in the given locale, e.g. 'nov. 26'."""
    return format_date(pd.Timestamp(d).date(), "MMM yy", locale=locale)


def month_labels(as_of_date: pd.Timestamp, n_months: int) -> List[str]:
    """
    Labels for months 1..n_months after as_of_date.
    Month m is as_of_date + m calendar months (day clamped to month end).
    """
    anchor = pd.Timestamp(as_of_date).to_pydatetime()
    return [month_label(anchor + relativedelta(months=m)) for m in range(1, n_months + 1)]
