"""Interactive REPL for Brak, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .repl_highlight import BrakLexer
from .runner import BrakError, dump_ast, repl_eval, report_error
from .runtime import Runtime
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled, stringify

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/ast": ("Show the parse tree of an expression", "<source>"),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, rt_box: list[Runtime]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/ast":
        try:
            print(dump_ast(arg), end="")
        except BrakError as exc:
            report_error(exc)
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        rt_box[0] = Runtime(printer=rt_box[0].printer)
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, rt_box: list[Runtime]) -> None:
    """Evaluate or dispatch one submitted line, printing the outcome."""
    text = _normalize(text)
    if not text.strip():
        return

    if _handle_slash(text, rt_box):
        return

    try:
        result = repl_eval(text, rt_box[0])
    except BrakError as exc:
        report_error(exc)
        return

    print(f"=> {stringify(result)}")


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the runtime.
    rt_box: list[Runtime] = [Runtime()]

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=BrakLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("brak repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        eval_line(text, rt_box)
