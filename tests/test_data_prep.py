import pandas as pd
import pytest

from core.schema import Pocket
from data_prep.loader import import_pockets_csv, load_pockets_csv
from data_prep.pocket_table import pockets_from_frame, pockets_to_frame
from data_prep.validators import validate_pocket_table, validate_pockets


def test_load_csv_with_aliases(tmp_path) -> None:
    path = tmp_path / "pockets.csv"
    path.write_text(
        "key,name,initial,monthly,exp\n"
        "pea,PEA,10000,200,0.06\n"
        "livret,,5000,,0.03\n"
        "cto,CTO,abc,50,0.05\n",
        encoding="utf-8",
    )
    pockets = load_pockets_csv(str(path))
    assert list(pockets) == ["pea", "livret", "cto"]
    assert pockets["pea"] == Pocket("pea", "PEA", 10000.0, 200.0, 0.06)
    assert pockets["livret"].label == "livret"
    assert pockets["livret"].monthly_contribution == 0.0
    assert pockets["cto"].initial_balance == 0.0


def test_missing_key_column() -> None:
    with pytest.raises(ValueError):
        pockets_from_frame(pd.DataFrame({"label": ["PEA"]}))


def test_duplicate_keys_rejected() -> None:
    df = pd.DataFrame({"key": ["pea", "pea"], "initial_balance": [1, 2]})
    with pytest.raises(ValueError):
        pockets_from_frame(df)
    assert not validate_pocket_table(df).is_valid


def test_frame_round_trip_keeps_order(pockets) -> None:
    assert pockets_from_frame(pockets_to_frame(pockets)) == pockets


def test_validate_pockets_flags_problems() -> None:
    result = validate_pockets({
        "a": Pocket("a", "A", -10.0, 0.0, 0.05),
        "b": Pocket("b", "B", 10.0, 0.0, -1.0),
        "c": Pocket("c", "C", 10.0, -5.0, 6.0),
        "d": Pocket("d", " ", 10.0, 0.0, 0.05),
    })
    assert not result.is_valid
    assert len(result.errors) == 3
    assert len(result.warnings) == 2
    assert "ERRORS (3)" in result.summary()


def test_validate_clean_pockets(pockets) -> None:
    result = validate_pockets(pockets)
    assert result.is_valid
    assert result.warnings == []
    assert result.summary() == "✓ All checks passed."


def test_validate_table_warns_on_unparseable_numbers() -> None:
    df = pd.DataFrame({"key": ["a", "b"], "initial": ["100", "n/a"]})
    result = validate_pocket_table(df)
    assert result.is_valid
    assert len(result.warnings) == 1


def test_import_csv_reports_unparseable_numbers(tmp_path) -> None:
    path = tmp_path / "pockets.csv"
    path.write_text(
        "key,name,initial,monthly,exp\n"
        "pea,PEA,10000,abc,0.06\n"
        "cto,CTO,500,50,6\n",
        encoding="utf-8",
    )
    pockets, result = import_pockets_csv(str(path))
    assert result.is_valid
    assert list(pockets) == ["pea", "cto"]
    assert pockets["pea"].monthly_contribution == 0.0
    assert any("unparseable monthly_contribution" in w for w in result.warnings)
    assert any("'cto'" in w for w in result.warnings)


def test_import_csv_stops_on_duplicate_keys(tmp_path) -> None:
    path = tmp_path / "pockets.csv"
    path.write_text("key,initial\npea,1\npea,2\n", encoding="utf-8")
    pockets, result = import_pockets_csv(str(path))
    assert pockets == {}
    assert not result.is_valid
