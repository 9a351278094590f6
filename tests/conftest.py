import sys
from pathlib import Path

import pandas as pd
import pytest

# Add project root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from core.schema import Pocket  # noqa: E402


@pytest.fixture
def as_of() -> pd.Timestamp:
    return pd.Timestamp("2026-01-15")


@pytest.fixture
def pockets():
    return {
        "pea": Pocket("pea", "PEA", 10_000.0, 200.0, 0.06),
        "livret": Pocket("livret", "Livret", 5_000.0, 100.0, 0.03),
        "crypto": Pocket("crypto", "Crypto", 1_000.0, 50.0, 0.10),
    }
