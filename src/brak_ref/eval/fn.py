from __future__ import annotations

from typing import Callable

from ..runtime import Builtins, BrkNull, BrkValue, BrakCallError, Runtime, Scope
from ..tree import Func, FuncCall, Node
from .expr import eval_expression

EvalFunc = Callable[[Node, Runtime], BrkValue]

def eval_fn_literal(node: Func, rt: Runtime) -> BrkValue:
    """A closure is its own value; nothing runs until it is called."""
    return node

def _has_argument(call: FuncCall) -> bool:
    return call.param is not None and bool(call.param.tokens)

def eval_call(node: FuncCall, rt: Runtime, eval_func: EvalFunc) -> BrkValue:
    builtin = Builtins.functions.get(node.name)
    if builtin is not None:
        arg: BrkValue = BrkNull()
        if node.param is not None:
            arg = eval_expression(node.param, rt, eval_func)
        return builtin(rt, arg)

    fn = rt.resolve(node.name)
    if not isinstance(fn, Func):
        raise BrakCallError(node.name, fn)

    return call_closure(fn, node, rt, eval_func)

def call_closure(fn: Func, call: FuncCall, rt: Runtime, eval_func: EvalFunc) -> BrkValue:
    if fn.body is None:
        return BrkNull()

    seed: Scope = {}

    # the argument is evaluated in the caller's scope, before the switch
    if fn.param is not None and _has_argument(call):
        assert call.param is not None
        seed[fn.param] = eval_expression(call.param, rt, eval_func)

    with rt.scopes.isolated():
        return eval_expression(fn.body, rt, eval_func, seed=seed)
