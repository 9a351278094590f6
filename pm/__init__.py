"""
PM (Portfolio Metrics) outputs — blended return, horizon KPIs, and allocation.
"""

from .returns import weighted_return, resolve_global_rate
from .metrics import (
    value_at_years,
    contributions_at_years,
    interest_at_years,
    horizon_kpis,
    kpis_to_frame,
)
from .allocation import allocate, allocation_to_frame

__all__ = [
    "weighted_return",
    "resolve_global_rate",
    "value_at_years",
    "contributions_at_years",
    "interest_at_years",
    "horizon_kpis",
    "kpis_to_frame",
    "allocate",
    "allocation_to_frame",
]
