"""prompt_toolkit lexer for live Brak syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, List

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import tokenize
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.LOOP: "keyword",
    TT.BREAK: "keyword",
    TT.WITH: "keyword",
    TT.IF: "keyword",
    TT.THEN: "keyword",
    TT.ELSE: "keyword",
    TT.NULL: "constant",
    TT.NUMBER: "number",
    TT.CHAR: "string",
    TT.IDENT: "identifier",
    TT.AT: "function",
    TT.PIPE: "function",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.POW: "operator",
    TT.ASSIGN: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.COMMA: "punctuation",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.ERROR: "error",
}


def token_style(tok: Tok, prev: Tok | None) -> str:
    """Style for one token; the name after `@` is highlighted as a call."""
    if tok.type == TT.IDENT and prev is not None and prev.type == TT.AT:
        return GROUP_STYLE["function"]

    group = _TT_GROUP.get(tok.type)
    return GROUP_STYLE.get(group, "") if group else ""


def highlight_line(line: str) -> StyleAndTextTuples:
    """Split one line into (style, text) fragments, keeping whitespace."""
    fragments: StyleAndTextTuples = []
    col = 0
    prev: Tok | None = None

    for tok in tokenize(line):
        if tok.type == TT.EOF:
            break

        start = tok.column - 1
        text = str(tok.value)

        if start > col:
            fragments.append(("", line[col:start]))

        fragments.append((token_style(tok, prev), text))
        col = start + len(text)
        prev = tok

    if col < len(line):
        fragments.append(("", line[col:]))

    return fragments


class BrakLexer(Lexer):
    """Highlight each document line independently with the Brak lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines: List[str] = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return []
            return highlight_line(lines[lineno])

        return get_line
