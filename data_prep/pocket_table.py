"""
Build ordered pocket mappings from tabular input (CSV exports, editor tables).
"""

from __future__ import annotations

from typing import Dict, List, Mapping

import pandas as pd

from core.schema import POCKET_COLUMNS, Pocket, pockets_from_records
from core.utils import require_columns


_COLUMN_ALIASES: Dict[str, str] = {
    # identifiers
    "id": "key",
    "Key": "key",
    "pocket": "key",
    "name": "label",
    "Label": "label",
    # balances
    "initial": "initial_balance",
    "balance": "initial_balance",
    "Initial Balance": "initial_balance",
    "monthly": "monthly_contribution",
    "contribution": "monthly_contribution",
    "Monthly Contribution": "monthly_contribution",
    # rates
    "exp": "expected_annual_return",
    "rate": "expected_annual_return",
    "expected_return": "expected_annual_return",
    "Expected Return": "expected_annual_return",
}

_NUMERIC_COLUMNS = ("initial_balance", "monthly_contribution", "expected_annual_return")


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with common column name aliases normalized (first occurrence wins)."""
    ren = {c: _COLUMN_ALIASES.get(str(c).strip(), str(c).strip()) for c in df.columns}
    out = df.rename(columns=ren)
    return out.loc[:, ~out.columns.duplicated()].copy()


def pockets_from_frame(df: pd.DataFrame) -> Dict[str, Pocket]:
    """
    Turn a pocket table into an ordered key -> Pocket mapping.

    Only `key` is required. Missing labels fall back to the key; missing or
    unparseable numerics become 0.
    """
    d2 = canonicalize_columns(df)
    require_columns(d2, ["key"])

    for col in _NUMERIC_COLUMNS:
        if col in d2.columns:
            d2[col] = pd.to_numeric(d2[col], errors="coerce").fillna(0.0)
        else:
            d2[col] = 0.0
    if "label" not in d2.columns:
        d2["label"] = d2["key"]

    d2 = d2[d2["key"].notna()].copy()
    d2["key"] = d2["key"].astype(str).str.strip()
    d2["label"] = d2["label"].where(d2["label"].notna(), d2["key"]).astype(str)

    records: List[Mapping[str, object]] = d2.loc[:, list(POCKET_COLUMNS)].to_dict("records")
    return pockets_from_records(records)


def pockets_to_frame(pockets: Mapping[str, Pocket]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "key": p.key,
                "label": p.label,
                "initial_balance": p.initial_balance,
                "monthly_contribution": p.monthly_contribution,
                "expected_annual_return": p.expected_annual_return,
            }
            for p in pockets.values()
        ],
        columns=list(POCKET_COLUMNS),
    )
