"""Display formatting for the dashboard. The engine never rounds; only this module does."""

from __future__ import annotations

from typing import Optional


def fmt_eur(val: Optional[float]) -> str:
    """12345.6 -> '12 346 €' (French grouping, no decimals); None -> '–'."""
    if val is None:
        return "–"
    s = f"{val:,.0f}".replace(",", " ")
    return f"{s} €"


def fmt_pct(val: Optional[float]) -> str:
    """0.0625 -> '6.25%'."""
    return f"{(val or 0.0) * 100:.2f}%"


def fmt_axis_k(val: float) -> str:
    """Axis ticks: 12400 -> '12k', 950 -> '950'."""
    if val >= 1000:
        return f"{round(val / 1000)}k"
    return f"{val:g}"
