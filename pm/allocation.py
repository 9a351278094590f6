from __future__ import annotations

from typing import Iterable, Mapping, Sequence, Tuple

import pandas as pd

from core.config import DEFAULT_PALETTE
from core.schema import AllocationEntry, ExternalHolding, Pocket
from core.valuation import effective_balances


def allocate(
    pockets: Mapping[str, Pocket],
    holdings: Iterable[ExternalHolding] = (),
    *,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> Tuple[AllocationEntry, ...]:
    """
    Current-balance breakdown for the allocation chart.

    Only pockets with a strictly positive effective balance are listed, in
    declaration order. Colours cycle through `palette` by output position.
    """
    if not palette:
        raise ValueError("palette must contain at least one colour")

    balances = effective_balances(pockets, holdings)
    kept = [(key, balances[key]) for key in pockets if balances[key] > 0]
    total = sum(v for _, v in kept)

    return tuple(
        AllocationEntry(
            key=key,
            label=pockets[key].label,
            value=value,
            color=palette[pos % len(palette)],
            share=value / total if total > 0 else 0.0,
        )
        for pos, (key, value) in enumerate(kept)
    )


def allocation_to_frame(entries: Iterable[AllocationEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"key": e.key, "label": e.label, "value": e.value,
             "share": e.share, "color": e.color}
            for e in entries
        ],
        columns=["key", "label", "value", "share", "color"],
    )
