from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional

from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source
from .runtime import BrkValue, BrakRuntimeError, Runtime
from .tree import pretty
from .utils import debug_py_trace_enabled, stringify

BrakError = (LexError, ParseError, BrakRuntimeError)

def run(src: str, rt: Optional[Runtime]=None) -> BrkValue:
    """Parse and evaluate a whole program; a file run gets a fresh runtime."""
    program = parse_source(src.strip())
    if rt is None:
        rt = Runtime()

    return rt.run(program)

def repl_eval(text: str, rt: Runtime) -> BrkValue:
    """Evaluate one REPL line against a long-lived runtime."""
    return rt.run(parse_source(text))

def dump_ast(src: str) -> str:
    program = parse_source(src.strip())

    # rendering recurses once per bracket level
    try:
        return pretty(program)
    except RecursionError:
        raise ParseError("Program nested too deeply to render") from None

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if not debug_py_trace_enabled():
        return

    tb = getattr(exc, "py_trace", None) or exc.__traceback__
    if tb:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(tb)), file=sys.stderr, end="")

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing file => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        # name too long for the filesystem: literal source
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[list[str]]=None) -> int:
    show_ast = False
    interactive = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--ast":
            show_ast = True
            continue

        if token in ("-i", "--repl"):
            interactive = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if interactive:
        from .repl import repl  # prompt_toolkit only loads for the REPL

        repl()
        return 0

    source = _load_source(arg or "-")

    try:
        if show_ast:
            print(dump_ast(source), end="")
            return 0

        print(stringify(run(source)))
    except BrakError as exc:
        report_error(exc)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
