"""
Effective balances: a pocket's stored balance plus any externally priced holdings,
evaluated at read time. Pockets themselves are never modified.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from .schema import ExternalHolding, Pocket
from .utils import finite_or_zero


def reprice_holdings(
    holdings: Iterable[ExternalHolding],
    price: Optional[float],
) -> tuple:
    """Return copies of `holdings` carrying `price` (the latest known quote)."""
    return tuple(
        ExternalHolding(pocket_key=h.pocket_key, quantity=h.quantity, unit_price=price)
        for h in holdings
    )


def holding_values_by_pocket(holdings: Iterable[ExternalHolding]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for h in holdings:
        out[h.pocket_key] = out.get(h.pocket_key, 0.0) + h.value
    return out


def effective_balance(pocket: Pocket, holdings: Iterable[ExternalHolding] = ()) -> float:
    extra = sum(h.value for h in holdings if h.pocket_key == pocket.key)
    return finite_or_zero(pocket.initial_balance) + extra


def effective_balances(
    pockets: Mapping[str, Pocket],
    holdings: Iterable[ExternalHolding] = (),
) -> Dict[str, float]:
    """key -> effective balance, in pocket declaration order."""
    extras = holding_values_by_pocket(holdings)
    unknown = set(extras) - set(pockets)
    if unknown:
        raise ValueError(f"Holdings reference unknown pockets: {sorted(unknown)}")
    return {
        key: finite_or_zero(p.initial_balance) + extras.get(key, 0.0)
        for key, p in pockets.items()
    }
