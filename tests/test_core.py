import logging
import math

import pandas as pd
import pytest

from core.config import ProjectionConfig
from core.log import configure_logging
from core.schema import ExternalHolding, default_pockets, pockets_from_records
from core.utils import finite_or_zero, month_label, month_labels
from core.valuation import effective_balance


def test_external_holding_value() -> None:
    assert ExternalHolding("crypto", 0.5, 2000.0).value == 1000.0
    assert ExternalHolding("crypto", 0.5, None).value == 0.0
    assert ExternalHolding("crypto", 0.5, math.nan).value == 0.0


def test_effective_balance_adds_matching_holdings_only() -> None:
    pocket = default_pockets()["crypto"]
    holdings = (ExternalHolding("crypto", 1.0, 10.0), ExternalHolding("pea", 1.0, 99.0))
    assert effective_balance(pocket, holdings) == 10.0


def test_default_pockets_order() -> None:
    assert list(default_pockets()) == ["assurance", "metaux", "pea", "livret", "cto", "crypto"]


def test_pockets_from_records_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        pockets_from_records([{"key": "a"}, {"key": "a"}])


@pytest.mark.parametrize("raw, expected", [
    (None, 0.0), ("abc", 0.0), (math.inf, 0.0), (math.nan, 0.0), ("12.5", 12.5), (3, 3.0),
])
def test_finite_or_zero(raw, expected) -> None:
    assert finite_or_zero(raw) == expected


def test_month_labels_clamp_to_month_end() -> None:
    labels = month_labels(pd.Timestamp("2026-01-31"), 3)
    assert labels == ["févr. 26", "mars 26", "avr. 26"]


def test_month_label_locale_is_explicit() -> None:
    d = pd.Timestamp("2026-02-15")
    assert month_label(d) == "févr. 26"
    assert month_label(d, locale="en_GB") == "Feb 26"


def test_configure_logging_is_idempotent() -> None:
    name = "wealth-projector-test"
    logger = configure_logging(logging.DEBUG, name=name)
    configure_logging(logging.DEBUG, name=name)
    assert len(logger.handlers) == 1


def test_projection_config_chart_horizon_is_free() -> None:
    cfg = ProjectionConfig(as_of_date=pd.Timestamp("2026-01-15"), years=7)
    assert cfg.n_months == 84
    assert cfg.kpi_horizons == (5, 10, 20)
    with pytest.raises(TypeError):
        ProjectionConfig(as_of_date=pd.Timestamp("2026-01-15"), horizon_choices=(5, 10, 20))
