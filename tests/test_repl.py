from __future__ import annotations

import os

import pytest
from prompt_toolkit.document import Document

from brak_ref.repl import _SlashCompleter, _handle_slash, _normalize, eval_line
from brak_ref.repl_highlight import GROUP_STYLE, BrakLexer, highlight_line
from brak_ref.utils import DEBUG_PY_TRACE_ENV
from tests.support.harness import BrkNumber, Runtime


@pytest.fixture
def rt_box() -> list[Runtime]:
    return [Runtime(printer=lambda _value: None)]


def test_eval_line_keeps_state(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    eval_line("x = 4", rt_box)
    eval_line("x * 2", rt_box)
    assert capsys.readouterr().out == "=> 4\n=> 8\n"


def test_eval_line_reports_errors(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    eval_line("x = 1", rt_box)
    eval_line("x = 2, y = +", rt_box)
    eval_line("x", rt_box)

    captured = capsys.readouterr()
    assert captured.out == "=> 1\n=> 1\n"
    assert captured.err.startswith("Error: No left operand for '+'")


def test_eval_line_ignores_blank_input(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    eval_line("   \u200b ", rt_box)
    assert capsys.readouterr().out == ""


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("1\u200b +\ufeff 2\r") == "1 + 2"


def test_reset_command(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    printer = rt_box[0].printer
    eval_line("x = 9", rt_box)
    eval_line("/reset", rt_box)
    eval_line("x", rt_box)

    assert capsys.readouterr().out == "=> 9\nEnvironment reset.\n=> null\n"
    assert rt_box[0].printer is printer


def test_ast_command(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/ast loop l ( break l )", rt_box)
    out = capsys.readouterr().out
    assert "loop" in out and "break" in out


def test_ast_command_reports_parse_errors(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/ast ( 1", rt_box)
    assert "Bracket left open" in capsys.readouterr().err


def test_py_traceback_toggle(
    rt_box, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    # setenv first so the variable is restored afterwards
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "0")

    _handle_slash("/py-traceback on", rt_box)
    assert os.environ[DEBUG_PY_TRACE_ENV] == "1"

    _handle_slash("/py-traceback", rt_box)
    assert DEBUG_PY_TRACE_ENV not in os.environ

    assert capsys.readouterr().out == "Python traceback: on\nPython traceback: off\n"


def test_unknown_command(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/nope", rt_box)
    assert capsys.readouterr().err == "Unknown command: /nope\n"


def test_plain_line_is_not_a_command(rt_box) -> None:
    assert not _handle_slash("1 + 1", rt_box)


def test_slash_completer() -> None:
    completions = list(_SlashCompleter().get_completions(Document("/r"), None))
    assert [c.text for c in completions] == ["/reset"]
    assert list(_SlashCompleter().get_completions(Document("x"), None)) == []


def test_highlight_line_preserves_text() -> None:
    line = "  f = | n | ( n * 2 ), @f ( 'a' ) % 1"
    fragments = highlight_line(line)
    assert "".join(text for _style, text in fragments) == line


def test_highlight_line_styles() -> None:
    styles = dict((text, style) for style, text in highlight_line("loop l ( @go ( 3 ) ) %"))
    assert styles["loop"] == GROUP_STYLE["keyword"]
    assert styles["go"] == GROUP_STYLE["function"]
    assert styles["3"] == GROUP_STYLE["number"]
    assert styles["%"] == GROUP_STYLE["error"]
    assert styles["l"] == GROUP_STYLE["identifier"]


def test_lexer_document_lines() -> None:
    get_line = BrakLexer().lex_document(Document("1\nnull"))
    assert get_line(1) == [(GROUP_STYLE["constant"], "null")]
    assert get_line(5) == []


def test_repl_runtime_values(rt_box) -> None:
    eval_line("z = 2 ** 3", rt_box)
    assert rt_box[0].resolve("z") == BrkNumber(8.0)


def test_ast_command_too_deep(rt_box, capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/ast " + "(" * 3000 + ")" * 3000, rt_box)
    assert "Program nested too deeply to render" in capsys.readouterr().err
