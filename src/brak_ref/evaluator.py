from __future__ import annotations

from typing import Callable, Dict, Optional

from .runtime import BrkNull, BrkNumber, BrkValue, BrakRuntimeError, Runtime
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
)
from .eval.control import eval_break, eval_condition, eval_loop
from .eval.expr import eval_expression
from .eval.fn import eval_call, eval_fn_literal

EvalFunc = Callable[[Node, Runtime], BrkValue]

# ---------------- Public API ----------------

def eval_expr(program: Expression, rt: Optional[Runtime]=None) -> BrkValue:
    """Evaluate a parsed program; a fresh Runtime is used when none is given."""
    if rt is None:
        rt = Runtime()

    return rt.run(program)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, rt: Runtime) -> BrkValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise BrakRuntimeError(f"Cannot evaluate {type(n).__name__}")

    return handler(n, rt)

def _eval_literal(n: Literal, rt: Runtime) -> BrkValue:
    if n.value is None:
        return BrkNull()
    return BrkNumber(n.value)

def _eval_ident(n: Ident, rt: Runtime) -> BrkValue:
    return rt.resolve(n.name)

def _eval_op(n: Op, rt: Runtime) -> BrkValue:
    raise BrakRuntimeError(f"Operator '{n.code}' has no value on its own")

_NODE_DISPATCH: Dict[type, Callable[..., BrkValue]] = {
    Literal: _eval_literal,
    Ident: _eval_ident,
    Op: _eval_op,
    Expression: lambda n, rt: eval_expression(n, rt, eval_node),
    Condition: lambda n, rt: eval_condition(n, rt, eval_node),
    Loop: lambda n, rt: eval_loop(n, rt, eval_node),
    Break: lambda n, rt: eval_break(n, rt, eval_node),
    Func: eval_fn_literal,
    FuncCall: lambda n, rt: eval_call(n, rt, eval_node),
}
