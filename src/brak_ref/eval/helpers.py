from __future__ import annotations

import math
import operator
from typing import Callable, Dict

from ..runtime import BrkNumber, BrkValue, BrakTypeError
from ..tree import Func

def is_truthy(val: BrkValue) -> bool:
    match val:
        case BrkNumber(value=num):
            return num != 0
        case Func():
            return True
        case _:
            return False

def expect_number(val: BrkValue, op: str) -> float:
    if isinstance(val, BrkNumber):
        return float(val.value)

    raise BrakTypeError(f"Operand of '{op}' must be a number, got {type_name(val)}")

def type_name(val: BrkValue) -> str:
    if isinstance(val, Func):
        return "closure"
    if isinstance(val, BrkNumber):
        return "number"
    return "null"

def _div(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)

    return left / right

def _odd_integer(value: float) -> bool:
    return value.is_integer() and int(value) % 2 == 1

def _pow(left: float, right: float) -> float:
    if left == 0 and right < 0:
        return math.copysign(math.inf, left) if _odd_integer(right) else math.inf

    try:
        return math.pow(left, right)
    except OverflowError:
        return -math.inf if left < 0 and _odd_integer(right) else math.inf
    except ValueError:
        # negative base with a fractional exponent has no real result
        return math.nan

def _add(left: float, right: float) -> float:
    return left + right

def _sub(left: float, right: float) -> float:
    return left - right

def _mul(left: float, right: float) -> float:
    return left * right

def _compare(cmp: Callable[[float, float], bool]) -> Callable[[float, float], float]:
    def apply(left: float, right: float) -> float:
        return 1.0 if cmp(left, right) else 0.0

    return apply

ARITHMETIC: Dict[str, Callable[[float, float], float]] = {
    '**': _pow,
    '*': _mul,
    '/': _div,
    '+': _add,
    '-': _sub,
    '<': _compare(operator.lt),
    '>': _compare(operator.gt),
}

def apply_arith(op: str, left: float, right: float) -> float:
    return ARITHMETIC[op](left, right)
