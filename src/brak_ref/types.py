from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Tuple, Union

from typing_extensions import TypeAlias, TypeGuard

from .tree import Func, Node
from .utils import format_number

# ---------- Value Model ----------

@dataclass
class BrkNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class BrkNumber:
    value: float
    def __repr__(self) -> str:
        return format_number(float(self.value))

# closures are the parsed Func node itself
BrkValue: TypeAlias = Union[BrkNull, BrkNumber, Func]

_BRK_VALUE_TYPES: Tuple[type, ...] = (BrkNull, BrkNumber, Func)

def is_brk_value(value: Union[BrkValue, Node, None]) -> TypeGuard[BrkValue]:
    return isinstance(value, _BRK_VALUE_TYPES)

def is_null(value: BrkValue) -> bool:
    return isinstance(value, BrkNull)

# ---------- Exceptions ----------

class BrakRuntimeError(Exception):
    py_trace: Optional[TracebackType]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.py_trace = None

class BrakTypeError(BrakRuntimeError):
    pass

class BrakOperandError(BrakRuntimeError):
    pass

class BrakAssignmentError(BrakRuntimeError):
    pass

class BrakCallError(BrakRuntimeError):
    def __init__(self, name: str, value: BrkValue):
        super().__init__(f"'{name}' is not a function (got {value!r})")
        self.name = name
        self.value = value

class BrakLoopError(BrakRuntimeError):
    pass

class BrakRecursionError(BrakRuntimeError):
    """Scope nesting or host recursion exhausted."""
