from app.formatting import fmt_axis_k, fmt_eur, fmt_pct


def test_fmt_eur() -> None:
    assert fmt_eur(12345.6) == "12 346 €"
    assert fmt_eur(None) == "–"


def test_fmt_pct() -> None:
    assert fmt_pct(0.0625) == "6.25%"
    assert fmt_pct(None) == "0.00%"


def test_fmt_axis_k() -> None:
    assert fmt_axis_k(12500) == "12k"
    assert fmt_axis_k(950) == "950"
