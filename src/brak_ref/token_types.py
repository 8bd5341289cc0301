"""
Token Types for Brak

Shared between the lexer, the parser and the REPL highlighter.
"""

from typing import Any, Dict, Tuple
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - one per reserved word plus the literal classes"""

    # Literals
    NUMBER = auto()
    CHAR = auto()
    IDENT = auto()

    # Keywords
    NULL = auto()
    LOOP = auto()
    BREAK = auto()
    WITH = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    POW = auto()
    ASSIGN = auto()
    LT = auto()
    GT = auto()
    COMMA = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    QUOTE = auto()
    PIPE = auto()
    AT = auto()

    # Special
    ERROR = auto()
    EOF = auto()


RESERVED: Dict[str, TT] = {
    '(': TT.LPAR,
    ')': TT.RPAR,
    "'": TT.QUOTE,
    '|': TT.PIPE,
    ',': TT.COMMA,
    '+': TT.PLUS,
    '-': TT.MINUS,
    '*': TT.STAR,
    '**': TT.POW,
    '/': TT.SLASH,
    '=': TT.ASSIGN,
    '<': TT.LT,
    '>': TT.GT,
    'null': TT.NULL,
    'loop': TT.LOOP,
    'break': TT.BREAK,
    'with': TT.WITH,
    'if': TT.IF,
    'then': TT.THEN,
    'else': TT.ELSE,
    '@': TT.AT,
}

# Reserved words that become Op tokens
OPERATORS: Tuple[str, ...] = ('+', '-', '*', '**', '/', '=', '<', '>', ',')

KEYWORDS: Tuple[str, ...] = tuple(w for w in RESERVED if w.isalpha())


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
