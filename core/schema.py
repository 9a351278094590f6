from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

import pandas as pd

from .utils import finite_or_zero

# Canonical pocket table columns (CSV inputs, editor tables).
POCKET_COLUMNS: Tuple[str, ...] = (
    "key",
    "label",
    "initial_balance",
    "monthly_contribution",
    "expected_annual_return",
)


@dataclass(frozen=True)
class Pocket:
    """A named bucket of capital. The engine only ever reads these."""

    key: str
    label: str
    initial_balance: float = 0.0
    monthly_contribution: float = 0.0
    expected_annual_return: float = 0.0


@dataclass(frozen=True)
class ExternalHolding:
    """
    An externally priced quantity folded into one pocket's balance
    (e.g. a BTC amount priced from a live feed).
    An unknown price contributes nothing.
    """

    pocket_key: str
    quantity: float
    unit_price: Optional[float] = None

    @property
    def value(self) -> float:
        if self.unit_price is None:
            return 0.0
        return finite_or_zero(self.quantity) * finite_or_zero(self.unit_price)


@dataclass(frozen=True)
class ProjectionPoint:
    month: int
    label: str
    nominal: float
    real: float
    contribution: float


@dataclass(frozen=True)
class AggregatedPoint:
    month: int
    label: str
    total_nominal: float
    total_real: float
    contribution: float


@dataclass(frozen=True)
class AggregatedSeries:
    """Month-aligned portfolio totals plus the per-pocket trajectories behind them."""

    points: Tuple[AggregatedPoint, ...] = ()
    pocket_series: Mapping[str, Tuple[ProjectionPoint, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[AggregatedPoint]:
        return iter(self.points)

    def __getitem__(self, idx: int) -> AggregatedPoint:
        return self.points[idx]

    def truncate(self, n_months: int) -> "AggregatedSeries":
        n = max(int(n_months), 0)
        return AggregatedSeries(
            points=self.points[:n],
            pocket_series={k: pts[:n] for k, pts in self.pocket_series.items()},
        )

    def to_frame(self) -> pd.DataFrame:
        """One row per month: month, label, total_nominal, total_real, contribution."""
        return pd.DataFrame(
            [
                {
                    "month": p.month,
                    "label": p.label,
                    "total_nominal": p.total_nominal,
                    "total_real": p.total_real,
                    "contribution": p.contribution,
                }
                for p in self.points
            ],
            columns=["month", "label", "total_nominal", "total_real", "contribution"],
        )

    def pockets_to_frame(self) -> pd.DataFrame:
        """Long format: one row per (pocket, month)."""
        rows = []
        for key, pts in self.pocket_series.items():
            for p in pts:
                rows.append({
                    "pocket": key,
                    "month": p.month,
                    "label": p.label,
                    "nominal": p.nominal,
                    "real": p.real,
                    "contribution": p.contribution,
                })
        return pd.DataFrame(
            rows, columns=["pocket", "month", "label", "nominal", "real", "contribution"]
        )


@dataclass(frozen=True)
class AllocationEntry:
    key: str
    label: str
    value: float
    color: str
    share: float = 0.0


@dataclass(frozen=True)
class HorizonKPI:
    """Value / contributions / interest at the end of a given year. value == contributions + interest."""

    years: int
    value: float
    contributions: float
    interest: float


def pockets_from_records(records: Iterable[Mapping[str, object]]) -> Dict[str, Pocket]:
    """Build an ordered key -> Pocket mapping from plain dicts (declaration order kept)."""
    out: Dict[str, Pocket] = {}
    for rec in records:
        key = str(rec["key"])
        if key in out:
            raise ValueError(f"Duplicate pocket key: {key!r}")
        out[key] = Pocket(
            key=key,
            label=str(rec.get("label") or key),
            initial_balance=finite_or_zero(rec.get("initial_balance")),
            monthly_contribution=finite_or_zero(rec.get("monthly_contribution")),
            expected_annual_return=finite_or_zero(rec.get("expected_annual_return")),
        )
    return out


# The six pockets of the personal dashboard, all starting empty.
DEFAULT_POCKET_RECORDS: Tuple[Dict[str, object], ...] = (
    {"key": "assurance", "label": "Assurance-vie", "expected_annual_return": 0.035},
    {"key": "metaux", "label": "Métaux précieux", "expected_annual_return": 0.02},
    {"key": "pea", "label": "PEA", "expected_annual_return": 0.06},
    {"key": "livret", "label": "Livret", "expected_annual_return": 0.03},
    {"key": "cto", "label": "CTO", "expected_annual_return": 0.05},
    {"key": "crypto", "label": "Crypto", "expected_annual_return": 0.10},
)

# Pocket that receives the externally priced holding in the dashboard.
EXTERNAL_HOLDING_POCKET = "crypto"


def default_pockets() -> Dict[str, Pocket]:
    return pockets_from_records(DEFAULT_POCKET_RECORDS)
