"""
Projection runner: one call from UI inputs to everything the dashboard renders.

Pipeline:
  1. Reprice external holdings with the latest quote (absent quote -> 0)
  2. Project every pocket at its own rate and aggregate by month
  3. Extract KPIs at the configured year marks
  4. Summarize the current allocation
  5. Resolve the informational global rate (auto-weighted or manual)

Everything is recomputed from scratch on each call; nothing is cached or mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from core.config import ProjectionConfig
from core.schema import (
    AggregatedSeries,
    AllocationEntry,
    ExternalHolding,
    HorizonKPI,
    Pocket,
)
from core.utils import finite_or_zero
from core.valuation import effective_balances, reprice_holdings
from pm.allocation import allocate
from pm.metrics import horizon_kpis
from pm.returns import resolve_global_rate

from .projector import project_portfolio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    series: AggregatedSeries
    kpis: Tuple[HorizonKPI, ...]
    allocation: Tuple[AllocationEntry, ...]
    global_rate: float
    total_initial: float
    total_monthly: float
    effective_balances: Dict[str, float]


def run_projection(
    pockets: Mapping[str, Pocket],
    config: ProjectionConfig,
    *,
    holdings: Iterable[ExternalHolding] = (),
    price: Optional[float] = None,
) -> ProjectionResult:
    """
    Run the full projection for one snapshot of inputs.

    Parameters
    ----------
    pockets : mapping
        Ordered key -> Pocket.
    config : ProjectionConfig
        Anchor date, horizon, inflation, rate mode and KPI marks.
    holdings : iterable of ExternalHolding
        Externally priced holdings.
    price : float, optional
        Latest known unit price. When given it replaces every holding's price;
        non-finite values count as unknown.

    Returns
    -------
    ProjectionResult. `series` covers config.years; KPIs are read from a run
    long enough to reach the furthest KPI mark.
    """
    holdings = tuple(holdings)
    if price is not None:
        quote = finite_or_zero(price) or None
        holdings = reprice_holdings(holdings, quote)

    kpi_years = max(config.kpi_horizons) if config.kpi_horizons else 0
    run_years = max(int(config.years), kpi_years)
    full = project_portfolio(
        pockets, run_years,
        as_of_date=config.as_of_date,
        holdings=holdings,
        inflation_rate=config.inflation_rate,
    )

    balances = effective_balances(pockets, holdings)
    total_initial = sum(balances.values())
    total_monthly = sum(p.monthly_contribution for p in pockets.values())

    kpis = horizon_kpis(full, total_initial, total_monthly, config.kpi_horizons)
    allocation = allocate(pockets, holdings)
    global_rate = resolve_global_rate(
        pockets, holdings, mode=config.rate_mode, manual_rate=config.manual_rate
    )

    logger.debug(
        "run_projection: %d pockets, %d years, initial=%.2f monthly=%.2f rate=%.4f (%s)",
        len(pockets), config.years, total_initial, total_monthly, global_rate, config.rate_mode,
    )

    return ProjectionResult(
        series=full.truncate(config.n_months),
        kpis=kpis,
        allocation=allocation,
        global_rate=global_rate,
        total_initial=total_initial,
        total_monthly=total_monthly,
        effective_balances=balances,
    )
