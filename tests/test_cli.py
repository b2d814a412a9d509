from decimal import Decimal
from pathlib import Path

from deskcalc.cli import main
from deskcalc.session import Calculation, Session, VariableBinding, load_session_file, save_session_file


def _write(path: Path, session: Session) -> str:
    save_session_file(path, session)
    return str(path)


def test_show_prints_calculations_and_variables(tmp_path: Path, capsys):
    path = _write(
        tmp_path / "a.sch",
        Session(
            calculations=[Calculation("1/4", Decimal("0.25")), Calculation("1/0", "division by zero")],
            variables=[VariableBinding("k", Decimal(255))],
        ),
    )

    assert main(["show", path, "--format", "h"]) == 0

    out = capsys.readouterr().out
    assert "2 calculation(s)" in out
    assert "1/0  ->  error: division by zero" in out
    assert "k = 0xFF" in out


def test_check_reports_counts(tmp_path: Path, capsys):
    path = _write(tmp_path / "a.sch", Session(calculations=[Calculation("2", Decimal(2))]))

    assert main(["check", path]) == 0
    assert "1 calculations, 0 variables" in capsys.readouterr().out


def test_check_invalid_file_returns_2(tmp_path: Path, capsys):
    path = tmp_path / "bad.sch"
    path.write_text("0.9\n0\n0\n", encoding="utf-8")

    assert main(["check", str(path)]) == 2
    assert "not a valid session" in capsys.readouterr().err


def test_check_missing_file_returns_1(tmp_path: Path, capsys):
    assert main(["check", str(tmp_path / "missing.sch")]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_strict_flag_rejects_non_numeric_variable(tmp_path: Path):
    path = tmp_path / "loose.sch"
    path.write_text("0.10\n0\n1\nb\noops\n", encoding="utf-8")

    assert main(["check", str(path)]) == 0
    assert main(["--strict", "check", str(path)]) == 2


def test_merge_later_sessions_win(tmp_path: Path):
    first = _write(
        tmp_path / "first.sch",
        Session(calculations=[Calculation("1+1", Decimal(2))], variables=[VariableBinding("x", Decimal(1))]),
    )
    second = _write(
        tmp_path / "second.sch",
        Session(
            calculations=[Calculation("y", "unknown variable y")],
            variables=[VariableBinding("x", Decimal(2)), VariableBinding("y", Decimal(3))],
        ),
    )
    out = tmp_path / "merged.sch"

    assert main(["merge", first, second, "-o", str(out)]) == 0

    merged = load_session_file(out)
    assert [c.expression for c in merged.calculations] == ["1+1", "y"]
    assert merged.variables == [VariableBinding("x", Decimal(2)), VariableBinding("y", Decimal(3))]


def test_merge_with_bad_input_writes_nothing(tmp_path: Path):
    good = _write(tmp_path / "good.sch", Session())
    bad = tmp_path / "bad.sch"
    bad.write_text("garbage\n", encoding="utf-8")
    out = tmp_path / "merged.sch"

    assert main(["merge", good, str(bad), "-o", str(out)]) == 2
    assert not out.exists()
