"""
Portfolio projector: runs the compounding engine per pocket and sums the
trajectories month by month.

Each pocket always compounds at its OWN expected return. The blended/manual
global rate is informational and never feeds the summed trajectory.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Tuple

import numpy as np
import pandas as pd

from core.schema import (
    AggregatedPoint,
    AggregatedSeries,
    ExternalHolding,
    Pocket,
    ProjectionPoint,
)
from core.utils import month_labels
from core.valuation import effective_balances

from .compounding import project

logger = logging.getLogger(__name__)


def project_pockets(
    pockets: Mapping[str, Pocket],
    years: int,
    *,
    as_of_date: pd.Timestamp,
    holdings: Iterable[ExternalHolding] = (),
    inflation_rate: float = 0.0,
) -> Dict[str, Tuple[ProjectionPoint, ...]]:
    """key -> per-pocket projection, starting from holding-adjusted balances."""
    balances = effective_balances(pockets, holdings)
    return {
        key: project(
            balances[key],
            p.monthly_contribution,
            p.expected_annual_return,
            years,
            inflation_rate,
            as_of_date=as_of_date,
        )
        for key, p in pockets.items()
    }


def project_portfolio(
    pockets: Mapping[str, Pocket],
    years: int,
    *,
    as_of_date: pd.Timestamp,
    holdings: Iterable[ExternalHolding] = (),
    inflation_rate: float = 0.0,
) -> AggregatedSeries:
    """
    Aggregate all pockets into one series aligned by month index.

    Parameters
    ----------
    pockets : mapping
        Ordered key -> Pocket.
    years : int
        Shared horizon; every pocket series has years * 12 points.
    as_of_date : pd.Timestamp
        Single label anchor for the whole run.
    holdings : iterable of ExternalHolding
        Externally priced holdings folded into their pocket's starting balance.
    inflation_rate : float
        Annual inflation for the real totals.

    Returns
    -------
    AggregatedSeries with total_nominal, total_real and contribution summed per month.
    """
    holdings = tuple(holdings)
    n_months = max(int(years) * 12, 0)
    series = project_pockets(
        pockets, years,
        as_of_date=as_of_date, holdings=holdings, inflation_rate=inflation_rate,
    )

    total_nominal = np.zeros(n_months, dtype=float)
    total_real = np.zeros(n_months, dtype=float)
    total_contrib = np.zeros(n_months, dtype=float)
    for pts in series.values():
        total_nominal += np.fromiter((p.nominal for p in pts), dtype=float, count=n_months)
        total_real += np.fromiter((p.real for p in pts), dtype=float, count=n_months)
        total_contrib += np.fromiter((p.contribution for p in pts), dtype=float, count=n_months)

    # All pocket series share the anchor, so any one of them carries the labels.
    if series:
        labels = [p.label for p in next(iter(series.values()))]
    else:
        labels = month_labels(as_of_date, n_months)

    points = tuple(
        AggregatedPoint(
            month=t + 1,
            label=labels[t],
            total_nominal=float(total_nominal[t]),
            total_real=float(total_real[t]),
            contribution=float(total_contrib[t]),
        )
        for t in range(n_months)
    )

    logger.debug(
        "Projected %d pockets over %d months (final nominal %.2f)",
        len(series), n_months, points[-1].total_nominal if points else 0.0,
    )
    return AggregatedSeries(points=points, pocket_series=series)
