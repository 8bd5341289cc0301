"""Program tree for Brak.

Every node the parser produces is one of the dataclasses below. Structured
nodes (Condition, Loop, Break, Func, FuncCall) are built with empty slots and
filled as brackets close; `is_sealed()` reports whether every slot is set.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from lark import Token as LarkToken, Tree as LarkTree
from typing_extensions import TypeAlias

from .utils import format_number


@dataclass
class Literal:
    value: Optional[float]


@dataclass
class Ident:
    name: str


@dataclass
class Op:
    code: str


@dataclass
class Expression:
    tokens: List['Node'] = field(default_factory=list)


@dataclass
class Condition:
    condition: Optional[Expression] = None
    then: Optional[Expression] = None
    else_: Optional[Expression] = None

    SLOTS = ('condition', 'then', 'else_')

    def first_missing(self) -> Optional[str]:
        for slot in self.SLOTS:
            if getattr(self, slot) is None:
                return slot
        return None

    def is_sealed(self) -> bool:
        return self.first_missing() is None


@dataclass
class Loop:
    name: str
    body: Optional[Expression] = None

    def is_sealed(self) -> bool:
        return self.body is not None


@dataclass
class Break:
    name: str
    with_: Optional[Expression] = field(default_factory=Expression)

    def is_sealed(self) -> bool:
        return self.with_ is not None


@dataclass
class Func:
    """Closure: a parameter name plus a body; the body is shared, never copied."""
    param: Optional[str]
    body: Optional[Expression] = None

    def is_sealed(self) -> bool:
        return self.body is not None


@dataclass
class FuncCall:
    name: str
    param: Optional[Expression] = None

    def is_sealed(self) -> bool:
        return self.param is not None


Structured: TypeAlias = Union[Condition, Loop, Break, Func, FuncCall]
Node: TypeAlias = Union[Literal, Ident, Op, Expression, Condition, Loop, Break, Func, FuncCall]

STRUCTURED: Tuple[type, ...] = (Condition, Loop, Break, Func, FuncCall)


def is_structured(node: Node) -> bool:
    return isinstance(node, STRUCTURED)


def is_op(node: Node, *codes: str) -> bool:
    if not isinstance(node, Op):
        return False
    return not codes or node.code in codes


def node_children(node: Node) -> List[Expression]:
    """Sub-expressions held by a node, in source order (unset slots skipped)."""
    match node:
        case Expression(tokens=tokens):
            return list(tokens)
        case Condition(condition=c, then=t, else_=e):
            slots = [c, t, e]
        case Loop(body=b) | Func(body=b):
            slots = [b]
        case Break(with_=w):
            slots = [w]
        case FuncCall(param=p):
            slots = [p]
        case _:
            return []

    return [s for s in slots if s is not None]


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal."""
    stack: List[Node] = [node]

    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(node_children(current)))


def find_unsealed(node: Node) -> Optional[Node]:
    for current in walk(node):
        if is_structured(current) and not current.is_sealed():
            return current

    return None


# ---------- lark rendering ----------

def _slot(expr: Optional[Expression]) -> LarkTree:
    if expr is None:
        return LarkTree('missing', [])
    return to_lark(expr)


def to_lark(node: Node) -> Union[LarkTree, LarkToken]:
    """Render a program tree as a lark Tree (for `--ast` dumps and comparisons)."""
    match node:
        case Literal(value=None):
            return LarkToken('NULL', 'null')
        case Literal(value=v):
            return LarkToken('NUMBER', format_number(v))
        case Ident(name=name):
            return LarkToken('IDENT', name)
        case Op(code=code):
            return LarkToken('OP', code)
        case Expression(tokens=tokens):
            return LarkTree('expression', [to_lark(t) for t in tokens])
        case Condition(condition=c, then=t, else_=e):
            return LarkTree('condition', [_slot(c), _slot(t), _slot(e)])
        case Loop(name=name, body=body):
            return LarkTree('loop', [LarkToken('NAME', name), _slot(body)])
        case Break(name=name, with_=w):
            return LarkTree('break', [LarkToken('NAME', name), _slot(w)])
        case Func(param=param, body=body):
            head = LarkToken('PARAM', param) if param is not None else LarkToken('NULL', 'null')
            return LarkTree('func', [head, _slot(body)])
        case FuncCall(name=name, param=param):
            return LarkTree('call', [LarkToken('NAME', name), _slot(param)])

    raise TypeError(f"Not a Brak node: {type(node).__name__}")


def pretty(node: Node) -> str:
    rendered = to_lark(node)
    if isinstance(rendered, LarkTree):
        return rendered.pretty()
    return f"{rendered.type}\t{rendered.value!r}\n"
