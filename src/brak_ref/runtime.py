from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from .tree import Expression
from .types import (
    BrkNull, BrkNumber, BrkValue,
    BrakRuntimeError, BrakTypeError, BrakOperandError, BrakAssignmentError,
    BrakCallError, BrakLoopError, BrakRecursionError,
    is_brk_value, is_null,
)
from .utils import max_depth_from_env, max_iterations_from_env, stringify

Scope = Dict[str, BrkValue]
Printer = Callable[[BrkValue], None]
BuiltinFn = Callable[['Runtime', BrkValue], BrkValue]

# ---------- Builtins ----------

class Builtins:
    functions: Dict[str, BuiltinFn] = {}

def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = fn
        return fn

    return dec

@register_builtin("print")
def _builtin_print(rt: 'Runtime', value: BrkValue) -> BrkValue:
    rt.printer(value)
    return BrkNull()

def _default_printer(value: BrkValue) -> None:
    print(stringify(value))

# ---------- Scopes ----------

class ScopeStack:
    """Frame 0 is the global frame; it is never popped."""

    def __init__(self, globals_: Optional[Scope]=None):
        self.frames: List[Scope] = [dict(globals_ or {})]

    @property
    def globals(self) -> Scope:
        return self.frames[0]

    def push(self, seed: Optional[Scope]=None) -> None:
        self.frames.append(dict(seed or {}))

    def pop(self) -> Scope:
        if len(self.frames) == 1:
            raise BrakRuntimeError("Cannot pop the global frame")

        return self.frames.pop()

    def resolve(self, name: str) -> BrkValue:
        for scope in reversed(self.frames):
            if name in scope:
                return scope[name]

        return BrkNull()

    def assign(self, name: str, value: BrkValue) -> None:
        """Overwrite the innermost non-null binding, else create a global."""
        for scope in reversed(self.frames):
            bound = scope.get(name)
            if bound is not None and not is_null(bound):
                scope[name] = value
                return

        self.globals[name] = value

    @contextmanager
    def isolated(self) -> Iterator[None]:
        """Hide every frame except the global one (closure bodies)."""
        saved = self.frames
        self.frames = [saved[0]]

        try:
            yield
        finally:
            self.frames = saved

# ---------- Runtime ----------

class Runtime:
    """One evaluator instance: scope stack, loop-name stack and limits."""

    def __init__(
        self,
        max_depth: Optional[int]=None,
        max_iterations: Optional[int]=None,
        printer: Optional[Printer]=None,
    ):
        self.scopes = ScopeStack()
        self.loops: List[str] = []
        self.depth = 0
        self.max_depth = max_depth if max_depth is not None else max_depth_from_env()
        self.max_iterations = max_iterations if max_iterations is not None else max_iterations_from_env()
        self.printer: Printer = printer or _default_printer

    @contextmanager
    def scope(self, seed: Optional[Scope]=None) -> Iterator[None]:
        if self.depth >= self.max_depth:
            raise BrakRecursionError(f"Maximum nesting depth of {self.max_depth} exceeded")

        self.depth += 1
        self.scopes.push(seed)

        try:
            yield
        finally:
            self.scopes.pop()
            self.depth -= 1

    def resolve(self, name: str) -> BrkValue:
        return self.scopes.resolve(name)

    def assign(self, name: str, value: BrkValue) -> None:
        self.scopes.assign(name, value)

    # loop-name stack

    def enter_loop(self, name: str) -> None:
        if name in self.loops:
            raise BrakLoopError(f"Loop '{name}' is already running")

        self.loops.append(name)

    def loop_is_current(self, name: str) -> bool:
        return bool(self.loops) and self.loops[-1] == name

    def break_loop(self, name: str) -> None:
        """Drop the innermost loop called `name` and every loop nested in it."""
        for idx in range(len(self.loops) - 1, -1, -1):
            if self.loops[idx] == name:
                del self.loops[idx:]
                return

        raise BrakLoopError(f"No running loop named '{name}' to break")

    # top level

    def run(self, program: Expression) -> BrkValue:
        """Evaluate one parsed input; on failure the globals roll back."""
        from .evaluator import eval_node  # local import to avoid cycle

        saved = dict(self.scopes.globals)

        try:
            return eval_node(program, self)
        except RecursionError as exc:
            self._reset(saved)
            err = BrakRecursionError("Host recursion limit exceeded")
            err.py_trace = exc.__traceback__
            raise err from None
        except BrakRuntimeError as exc:
            self._reset(saved)
            exc.py_trace = exc.__traceback__
            raise

    def _reset(self, saved_globals: Scope) -> None:
        self.scopes = ScopeStack(saved_globals)
        self.loops.clear()
        self.depth = 0

__all__ = [
    "BrkNull", "BrkNumber", "BrkValue",
    "BrakRuntimeError", "BrakTypeError", "BrakOperandError", "BrakAssignmentError",
    "BrakCallError", "BrakLoopError", "BrakRecursionError",
    "Builtins", "Runtime", "Scope", "ScopeStack",
    "is_brk_value", "is_null", "register_builtin",
]
