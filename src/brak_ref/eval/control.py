from __future__ import annotations

from typing import Callable

from ..runtime import BrkNull, BrkValue, BrakLoopError, Runtime
from ..tree import Break, Condition, Loop, Node
from .expr import eval_expression
from .helpers import is_truthy

EvalFunc = Callable[[Node, Runtime], BrkValue]

def eval_condition(node: Condition, rt: Runtime, eval_func: EvalFunc) -> BrkValue:
    if node.condition is None:
        return BrkNull()

    test = eval_expression(node.condition, rt, eval_func)
    branch = node.then if is_truthy(test) else node.else_

    if branch is None:
        return BrkNull()

    return eval_expression(branch, rt, eval_func)

def eval_loop(node: Loop, rt: Runtime, eval_func: EvalFunc) -> BrkValue:
    """Run the body until a break takes `node.name` off the top of the loop stack."""
    rt.enter_loop(node.name)
    result: BrkValue = BrkNull()
    iterations = 0

    if node.body is None:
        rt.break_loop(node.name)
        return result

    while rt.loop_is_current(node.name):
        if rt.max_iterations is not None and iterations >= rt.max_iterations:
            raise BrakLoopError(f"Loop '{node.name}' exceeded {rt.max_iterations} iterations")

        iterations += 1
        result = eval_expression(node.body, rt, eval_func)

    return result

def eval_break(node: Break, rt: Runtime, eval_func: EvalFunc) -> BrkValue:
    value: BrkValue = BrkNull()

    if node.with_ is not None:
        value = eval_expression(node.with_, rt, eval_func)

    rt.break_loop(node.name)

    return value
