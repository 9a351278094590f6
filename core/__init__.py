"""
Core package — schema definitions, configuration, and shared utilities.
No projection logic lives here.
"""

from .schema import (
    POCKET_COLUMNS,
    Pocket,
    ExternalHolding,
    ProjectionPoint,
    AggregatedPoint,
    AggregatedSeries,
    AllocationEntry,
    HorizonKPI,
    pockets_from_records,
    default_pockets,
)
from .config import DEFAULT_PALETTE, ProjectionConfig, PriceFeedSettings
from .utils import require_columns, finite_or_zero, month_labels
from .valuation import effective_balance, effective_balances
from .log import configure_logging

__all__ = [
    "POCKET_COLUMNS",
    "Pocket",
    "ExternalHolding",
    "ProjectionPoint",
    "AggregatedPoint",
    "AggregatedSeries",
    "AllocationEntry",
    "HorizonKPI",
    "pockets_from_records",
    "default_pockets",
    "DEFAULT_PALETTE",
    "ProjectionConfig",
    "PriceFeedSettings",
    "require_columns",
    "finite_or_zero",
    "month_labels",
    "effective_balance",
    "effective_balances",
    "configure_logging",
]
