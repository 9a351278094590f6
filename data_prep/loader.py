from __future__ import annotations

from typing import Dict, Tuple

import pandas as pd

from core.schema import Pocket

from .pocket_table import pockets_from_frame
from .validators import ValidationResult, validate_pocket_table, validate_pockets


def load_pockets_csv(path: str) -> Dict[str, Pocket]:
    """
    Load pocket definitions from a CSV (one row per pocket, file order kept).
    """
    return pockets_from_frame(pd.read_csv(path))


def import_pockets_csv(path) -> Tuple[Dict[str, Pocket], ValidationResult]:
    """
    Read, check and build pockets from an uploaded CSV.

    Table checks run on the raw frame so unparseable numbers are reported before
    they are zeroed; pocket checks run on the result. Pockets are empty when
    the table has errors.
    """
    df = pd.read_csv(path)
    result = validate_pocket_table(df)
    if not result.is_valid:
        return {}, result

    pockets = pockets_from_frame(df)
    checked = validate_pockets(pockets)
    result.errors.extend(checked.errors)
    result.warnings.extend(checked.warnings)
    return pockets, result
