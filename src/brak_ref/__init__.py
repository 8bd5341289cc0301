"""Brak: a stack-parsed expression language with a tree-walking evaluator."""

from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source
from .runtime import BrkNull, BrkNumber, BrkValue, BrakRuntimeError, Runtime
from .runner import run

__all__ = [
    "BrkNull",
    "BrkNumber",
    "BrkValue",
    "BrakRuntimeError",
    "LexError",
    "ParseError",
    "Runtime",
    "parse_source",
    "run",
]
