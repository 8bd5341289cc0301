"""
Lexer for Brak

The parser pulls one lexical unit at a time from a cursor into the source,
so the lexer exposes small consuming primitives rather than a token stream:

- pop_while(): consume a character-class run
- match_reserved(): longest match with backtrack over the reserved words
- scan_number() / scan_ident() / scan_char_literal()

tokenize() wraps the same primitives into a flat stream for the REPL
highlighter.
"""

from typing import Callable, List, Optional, Tuple

from .chars import is_digit_char, is_ident_char, is_space
from .token_types import RESERVED, TT, Tok

CharTest = Callable[[str], bool]

_RESERVED_HEADS = frozenset(word[0] for word in RESERVED)


class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, pos: Optional[int] = None, source: Optional[str] = None):
        self.message = message
        self.pos = pos
        self.line: Optional[int] = None
        self.column: Optional[int] = None

        if pos is not None and source is not None:
            self.line, self.column = line_col(source, pos)
            super().__init__(f"{message} at line {self.line}, col {self.column}")
        else:
            super().__init__(message)


def line_col(source: str, pos: int) -> Tuple[int, int]:
    """1-based line and column of an offset"""
    line = source.count("\n", 0, pos) + 1
    last_nl = source.rfind("\n", 0, pos)
    return line, pos - last_nl


class Lexer:
    """Cursor over Brak source text."""

    RESERVED = RESERVED

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    # ========================================================================
    # Cursor primitives
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def pop_while(self, test: CharTest) -> Optional[str]:
        """Consume characters while test holds; None when nothing matched"""
        start = self.pos
        while self.pos < len(self.source) and test(self.source[self.pos]):
            self.pos += 1

        if self.pos == start:
            return None
        return self.source[start:self.pos]

    def skip_whitespace(self) -> bool:
        return self.pop_while(is_space) is not None

    # ========================================================================
    # Lexical units
    # ========================================================================

    def match_reserved(self) -> Optional[str]:
        """
        Consume the longest run that is still a prefix of some reserved word.
        If that run is not itself reserved, rewind and report no match.
        """
        self.skip_whitespace()
        start = self.pos
        word = ''

        while not self.at_end():
            candidate = word + self.source[self.pos]
            if not any(r.startswith(candidate) for r in self.RESERVED):
                break
            word = candidate
            self.pos += 1

        if word in self.RESERVED:
            # no word boundary: `loops` lexes as `loop` then `s`
            return word

        self.pos = start
        return None

    def expect_reserved(self, word: str) -> bool:
        """Consume `word` if it is the next reserved unit, else leave the cursor alone"""
        start = self.pos
        if self.match_reserved() == word:
            return True
        self.pos = start
        return False

    def scan_number(self) -> Optional[float]:
        self.skip_whitespace()
        start = self.pos
        run = self.pop_while(is_digit_char)
        if run is None:
            return None

        try:
            return float(run)
        except ValueError:
            raise LexError(f"Invalid number literal '{run}'", start, self.source) from None

    def scan_ident(self) -> Optional[str]:
        self.skip_whitespace()
        return self.pop_while(is_ident_char)

    def scan_char_literal(self) -> int:
        """Called with the opening quote consumed; returns the first character's code"""
        start = self.pos - 1
        body = self.pop_while(lambda ch: ch != "'")

        if body is None or self.at_end():
            raise LexError("Unclosed literal", start, self.source)

        self.pos += 1  # closing quote
        return ord(body[0])

    def scan_unknown(self) -> str:
        """Consume a run of characters no other rule accepts"""
        run = self.pop_while(
            lambda ch: not is_space(ch) and not is_ident_char(ch) and ch not in _RESERVED_HEADS
        )
        if run is None:
            # a reserved head that failed to match as a whole word
            run = self.source[self.pos]
            self.pos += 1
        return run

    def error(self, message: str, pos: Optional[int] = None) -> LexError:
        return LexError(message, self.pos if pos is None else pos, self.source)


def tokenize(source: str) -> List[Tok]:
    """Flat token stream; lexical problems become ERROR tokens instead of raising"""
    lexer = Lexer(source)
    tokens: List[Tok] = []

    def emit(token_type: TT, value, start: int) -> None:
        line, column = line_col(source, start)
        tokens.append(Tok(type=token_type, value=value, line=line, column=column))

    while True:
        lexer.skip_whitespace()
        if lexer.at_end():
            break

        start = lexer.pos
        try:
            word = lexer.match_reserved()

            if word == "'":
                lexer.scan_char_literal()
                emit(TT.CHAR, source[start:lexer.pos], start)
                continue

            if word is not None:
                emit(RESERVED[word], word, start)
                continue

            number = lexer.scan_number()
            if number is not None:
                emit(TT.NUMBER, source[start:lexer.pos], start)
                continue
        except LexError:
            if lexer.pos == start:
                lexer.pos = len(source)
            emit(TT.ERROR, source[start:lexer.pos], start)
            continue

        ident = lexer.scan_ident()
        if ident is not None:
            emit(TT.IDENT, ident, start)
            continue

        emit(TT.ERROR, lexer.scan_unknown(), start)

    emit(TT.EOF, None, len(source))
    return tokens
