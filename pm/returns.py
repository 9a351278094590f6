"""
Blended expected return, a value-weighted average of per-pocket rates.

Used for the "auto" global rate. In "manual" mode the user's constant is shown
instead; either way the number is informational (per-pocket rates drive the
projection).
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Tuple

from core.config import RateMode
from core.schema import ExternalHolding, Pocket
from core.valuation import effective_balances


def weighted_return(legs: Iterable[Tuple[float, float]]) -> float:
    """
    Σ(value × rate) / Σ value over legs with a positive, finite value.

    Zero, negative and non-finite values carry no weight; legs with a
    non-finite rate are ignored. Returns 0.0 when the total weight is <= 0.
    """
    total = 0.0
    acc = 0.0
    for value, rate in legs:
        value = float(value)
        rate = float(rate)
        if not (math.isfinite(value) and math.isfinite(rate)) or value <= 0:
            continue
        total += value
        acc += value * rate
    if total <= 0:
        return 0.0
    return acc / total


def resolve_global_rate(
    pockets: Mapping[str, Pocket],
    holdings: Iterable[ExternalHolding] = (),
    *,
    mode: RateMode = "auto",
    manual_rate: float = 0.0,
) -> float:
    """
    Global rate shown next to the projection.

    auto:   weighted over effective (holding-adjusted) balances
    manual: the supplied constant
    """
    if mode == "manual":
        return float(manual_rate)
    if mode != "auto":
        raise ValueError(f"Unknown rate mode: {mode!r}")
    balances = effective_balances(pockets, holdings)
    return weighted_return(
        (balances[key], p.expected_annual_return) for key, p in pockets.items()
    )
