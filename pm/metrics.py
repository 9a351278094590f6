"""
Horizon KPIs: value, contributions and interest at year marks.

interest is always value - contributions, so the three numbers reconcile by
construction.
"""

from __future__ import annotations

from typing import Iterable, Tuple

import pandas as pd

from core.schema import AggregatedSeries, HorizonKPI


def value_at_years(series: AggregatedSeries, years: int) -> float:
    """Nominal total at the end of year `years` (month years*12); 0 when out of range."""
    idx = int(years) * 12
    if idx <= 0 or idx > len(series):
        return 0.0
    return series[idx - 1].total_nominal


def contributions_at_years(total_initial: float, total_monthly: float, years: int) -> float:
    return total_initial + total_monthly * int(years) * 12


def interest_at_years(
    series: AggregatedSeries,
    total_initial: float,
    total_monthly: float,
    years: int,
) -> float:
    return value_at_years(series, years) - contributions_at_years(
        total_initial, total_monthly, years
    )


def horizon_kpis(
    series: AggregatedSeries,
    total_initial: float,
    total_monthly: float,
    horizons: Iterable[int] = (5, 10, 20),
) -> Tuple[HorizonKPI, ...]:
    out = []
    for y in horizons:
        value = value_at_years(series, y)
        contributions = contributions_at_years(total_initial, total_monthly, y)
        out.append(HorizonKPI(
            years=int(y),
            value=value,
            contributions=contributions,
            interest=value - contributions,
        ))
    return tuple(out)


def kpis_to_frame(kpis: Iterable[HorizonKPI]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"years": k.years, "value": k.value,
             "contributions": k.contributions, "interest": k.interest}
            for k in kpis
        ],
        columns=["years", "value", "contributions", "interest"],
    )
