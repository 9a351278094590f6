"""
Data quality validation for pocket inputs before they enter the engine.

Catches problems early:
- Missing or duplicate keys
- Negative starting balances
- Rates at or below -100% (the engine rejects them)
- Rates that look like percents instead of fractions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping

import numpy as np
import pandas as pd

from core.schema import Pocket

from .pocket_table import canonicalize_columns


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a set of pockets."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_pockets(pockets: Mapping[str, Pocket]) -> ValidationResult:
    """
    Run value checks on an ordered key -> Pocket mapping.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    if len(pockets) == 0:
        result.warnings.append("No pockets defined.")
        return result

    for key, p in pockets.items():
        if key != p.key:
            result.errors.append(f"Pocket stored under {key!r} has key {p.key!r}.")
        if not str(p.label).strip():
            result.errors.append(f"Pocket {key!r} has an empty label.")

        numbers = {
            "initial balance": p.initial_balance,
            "monthly contribution": p.monthly_contribution,
            "expected return": p.expected_annual_return,
        }
        bad = [name for name, v in numbers.items() if not np.isfinite(v)]
        if bad:
            result.errors.append(f"Pocket {key!r} has non-finite {', '.join(bad)}.")
            continue

        if p.initial_balance < 0:
            result.errors.append(f"Pocket {key!r} has a negative initial balance.")
        if p.expected_annual_return <= -1.0:
            result.errors.append(
                f"Pocket {key!r} has an expected return at or below -100%."
            )
        elif p.expected_annual_return > 1.0:
            result.warnings.append(
                f"Pocket {key!r} expects a return > 1.0 — check if rates are in "
                f"percent vs decimal form."
            )
        if p.monthly_contribution < 0:
            result.warnings.append(
                f"Pocket {key!r} has a negative monthly contribution (withdrawal)."
            )

    return result


def validate_pocket_table(df: pd.DataFrame) -> ValidationResult:
    """Table-level checks (keys present and unique) before building pockets."""
    result = ValidationResult()
    d2 = canonicalize_columns(df)

    if "key" not in d2.columns:
        result.errors.append("Missing required column: 'key'")
        return result
    if len(d2) == 0:
        result.errors.append("Pocket table is empty (0 rows).")
        return result

    n_missing = int(d2["key"].isna().sum())
    if n_missing > 0:
        result.errors.append(f"{n_missing} rows have null key.")

    keys = d2["key"].dropna().astype(str).str.strip()
    n_dup = int(keys.duplicated().sum())
    if n_dup > 0:
        result.errors.append(f"{n_dup} duplicate pocket keys found.")

    for col in ["initial_balance", "monthly_contribution", "expected_annual_return"]:
        if col in d2.columns:
            vals = pd.to_numeric(d2[col], errors="coerce")
            n_bad = int((vals.isna() & d2[col].notna()).sum())
            if n_bad > 0:
                result.warnings.append(f"{n_bad} rows have unparseable {col} (treated as 0).")

    return result
