from __future__ import annotations

import io
from pathlib import Path

import pytest

from brak_ref.runner import dump_ast, main
from tests.support.harness import BrkNumber, ParseError, run_program


def test_run_strips_surrounding_whitespace() -> None:
    assert run_program("\n\n  1 + 1  \n") == BrkNumber(2.0)


def test_runner_reports_parse_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        run_program("x = 1,\n( x + 2")

    err = exc_info.value
    assert err.line == 2
    assert "Bracket left open" in str(err)


def test_main_literal_source(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["2 * ( 3 + 4 )"]) == 0
    assert capsys.readouterr().out == "14\n"


@pytest.mark.parametrize(
    "source, printed",
    [
        pytest.param("null", "null", id="null"),
        pytest.param("1 / 0", "Infinity", id="infinity"),
        pytest.param("0 / 0", "NaN", id="nan"),
        pytest.param("| a | ( a )", "<closure |a|>", id="closure"),
        pytest.param("|| ( 1 )", "<closure ||>", id="closure-without-param"),
    ],
)
def test_main_display_forms(source: str, printed: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([source]) == 0
    assert capsys.readouterr().out == printed + "\n"


def test_main_reads_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = tmp_path / "count.brak"
    script.write_text("i = 0,\nloop l ( i = i + 1, if ( i > 2 ) then ( break l ) ),\ni\n", encoding="utf-8")

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "3\n"


def test_main_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("2 ** 10"))
    assert main([]) == 0
    assert capsys.readouterr().out == "1024\n"


def test_main_empty_stdin_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    with pytest.raises(SystemExit, match="No input provided on stdin"):
        main(["-"])


def test_main_ast(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--ast", "x = 1"]) == 0
    out = capsys.readouterr().out
    assert out == dump_ast("x = 1")
    assert out.startswith("expression")


def test_main_error_exit(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["1 + )"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Error: Bracket not opened before closing at line 1, col 5\n"


def test_main_runtime_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["@nothing ( )"]) == 1
    assert "is not a function" in capsys.readouterr().err


def test_main_python_traceback(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("BRAK_DEBUG_PY_TRACE", "1")
    assert main(["null + 1"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: Operand of '+' must be a number")
    assert "Python traceback:" in err


def test_main_rejects_extra_arguments() -> None:
    with pytest.raises(SystemExit, match="Unexpected argument: 2"):
        main(["1", "2"])


def test_main_long_literal_source(capsys: pytest.CaptureFixture[str]) -> None:
    source = "x = 1, " * 60 + "x"
    assert len(source) > 255

    assert main([source]) == 0
    assert capsys.readouterr().out == "1\n"


def test_main_directory_argument_is_source(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_dump_ast_too_deep() -> None:
    source = "(" * 3000 + ")" * 3000
    with pytest.raises(ParseError, match="Program nested too deeply to render"):
        dump_ast(source)


def test_main_ast_too_deep(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--ast", "(" * 3000 + ")" * 3000]) == 1
    assert capsys.readouterr().err == "Error: Program nested too deeply to render\n"
