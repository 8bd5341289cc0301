"""
Stack Parser for Brak

Brackets drive an explicit stack of pending token lists instead of
recursive-descent calls:

- `(` pushes an empty frame
- `)` pops the top frame and hands it, as an Expression, to the most recently
  pushed token of the frame beneath (first unfilled slot wins), or appends it
  as a plain Expression token
- keywords push structured tokens with empty slots and usually open a frame
  right away

Slot filling order on `)`:
1. Loop / Func body
2. Break with
3. FuncCall param
4. Condition condition, then, else
5. plain Expression
"""

from typing import Callable, Dict, List, Optional

from .lexer_rd import Lexer, line_col
from .token_types import OPERATORS
from .tree import (
    Break,
    Condition,
    Expression,
    Func,
    FuncCall,
    Ident,
    Literal,
    Loop,
    Node,
    Op,
    find_unsealed,
)

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
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


class Parser:
    """Stack parser: one lexical unit per step."""

    def __init__(self, source: str):
        self.source = source
        self.lexer = Lexer(source)
        self.frames: List[List[Node]] = [[]]

    # ========================================================================
    # Frame stack
    # ========================================================================

    @property
    def top(self) -> List[Node]:
        return self.frames[-1]

    def last_token(self) -> Optional[Node]:
        return self.top[-1] if self.top else None

    def push(self, node: Node) -> None:
        self.top.append(node)

    def open_frame(self) -> None:
        self.frames.append([])

    def error(self, message: str, pos: Optional[int] = None) -> ParseError:
        return ParseError(message, self.lexer.pos if pos is None else pos, self.source)

    def require_open(self, keyword: str) -> None:
        """Consume the `(` a keyword needs and open its frame"""
        if not self.lexer.expect_reserved('('):
            raise self.error(f"'{keyword}' must be followed by '('")
        self.open_frame()

    def require_name(self, keyword: str) -> str:
        name = self.lexer.scan_ident()
        if name is None:
            raise self.error(f"Expected a name after '{keyword}'")
        return name

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Expression:
        """Parse entire program into its root Expression"""
        while self.step():
            pass

        if len(self.frames) > 1:
            raise self.error("Bracket left open", len(self.source))

        program = Expression(self.frames[0])
        unsealed = find_unsealed(program)
        if unsealed is not None:
            raise self.error(f"Incomplete {type(unsealed).__name__.lower()}", len(self.source))

        return program

    def step(self) -> bool:
        """Consume one lexical unit; False at end of input"""
        lexer = self.lexer
        lexer.skip_whitespace()
        if lexer.at_end():
            return False

        start = lexer.pos
        word = lexer.match_reserved()

        if word is not None:
            handler = self._HANDLERS.get(word)
            if handler is not None:
                handler(self, start)
            elif word in OPERATORS:
                self.push(Op(word))
            return True

        number = lexer.scan_number()
        if number is not None:
            self.push(Literal(number))
            return True

        ident = lexer.scan_ident()
        if ident is not None:
            self.push(Ident(ident))
            return True

        run = lexer.scan_unknown()
        raise self.error(f"Unknown operator '{run}'", start)

    # ========================================================================
    # Brackets
    # ========================================================================

    def parse_open(self, start: int) -> None:
        self.open_frame()

    def parse_close(self, start: int) -> None:
        if len(self.frames) == 1:
            raise self.error("Bracket not opened before closing", start)

        self.attach(Expression(self.frames.pop()))

    def attach(self, expr: Expression) -> None:
        """Give a closed bracket to the first unfilled slot of the last token"""
        last = self.last_token()

        if isinstance(last, (Loop, Func)) and last.body is None:
            last.body = expr
        elif isinstance(last, Break) and last.with_ is None:
            last.with_ = expr
        elif isinstance(last, FuncCall) and last.param is None:
            last.param = expr
        elif isinstance(last, Condition) and last.first_missing() is not None:
            setattr(last, last.first_missing(), expr)
        else:
            self.push(expr)

    # ========================================================================
    # Keywords
    # ========================================================================

    def parse_if(self, start: int) -> None:
        # branches start as empty placeholders so the first `)` fills `condition`
        self.push(Condition(then=Expression(), else_=Expression()))
        self.require_open('if')

    def _parse_branch(self, keyword: str, slot: str) -> None:
        last = self.last_token()
        if not isinstance(last, Condition):
            raise self.error(f"'{keyword}' must follow an 'if' condition")

        setattr(last, slot, None)
        self.require_open(keyword)

    def parse_then(self, start: int) -> None:
        self._parse_branch('then', 'then')

    def parse_else(self, start: int) -> None:
        self._parse_branch('else', 'else_')

    def parse_call(self, start: int) -> None:
        name = self.require_name('@')
        self.push(FuncCall(name))
        self.require_open('@' + name)

    def parse_loop(self, start: int) -> None:
        name = self.require_name('loop')
        self.push(Loop(name))
        self.require_open(f'loop {name}')

    def parse_break(self, start: int) -> None:
        name = self.require_name('break')
        self.push(Break(name))

    def parse_with(self, start: int) -> None:
        last = self.last_token()
        if not isinstance(last, Break):
            raise self.error("'with' must follow 'break <name>'")

        last.with_ = None
        self.require_open('with')

    def parse_func(self, start: int) -> None:
        param = self.lexer.scan_ident()
        if not self.lexer.expect_reserved('|'):
            raise self.error("Missing closing '|' after function parameter")

        self.push(Func(param))
        self.require_open('|' + (param or '') + '|')

    def parse_null(self, start: int) -> None:
        self.push(Literal(None))

    def parse_char(self, start: int) -> None:
        self.push(Literal(float(self.lexer.scan_char_literal())))

    _HANDLERS: Dict[str, Callable[['Parser', int], None]] = {
        '(': parse_open,
        ')': parse_close,
        'if': parse_if,
        'then': parse_then,
        'else': parse_else,
        '@': parse_call,
        'loop': parse_loop,
        'break': parse_break,
        'with': parse_with,
        '|': parse_func,
        'null': parse_null,
        "'": parse_char,
    }


def parse_source(source: str) -> Expression:
    """Convenience function to parse source into a program Expression"""
    return Parser(source).parse()
