"""
Data preparation — loading pocket tables and validating them.
"""

from .loader import load_pockets_csv
from .pocket_table import (
    canonicalize_columns,
    pockets_from_frame,
    pockets_to_frame,
)
from .validators import ValidationResult, validate_pockets, validate_pocket_table

__all__ = [
    "load_pockets_csv",
    "canonicalize_columns",
    "pockets_from_frame",
    "pockets_to_frame",
    "ValidationResult",
    "validate_pockets",
    "validate_pocket_table",
]
