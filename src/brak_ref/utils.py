from __future__ import annotations

import math
import os as _os
from typing import Any, Optional

DEBUG_PY_TRACE_ENV = "BRAK_DEBUG_PY_TRACE"
MAX_DEPTH_ENV = "BRAK_MAX_DEPTH"
MAX_ITERATIONS_ENV = "BRAK_MAX_ITERATIONS"

DEFAULT_MAX_DEPTH = 150


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return str(int(value)) if value.is_integer() else str(value)


def stringify(value: Any) -> str:
    """Display form of a runtime value; closures are an opaque marker."""
    from .tree import Func

    if isinstance(value, Func):
        param = value.param or ""
        return f"<closure |{param}|>"

    return repr(value)


def debug_py_trace_enabled() -> bool:
    raw = _os.environ.get(DEBUG_PY_TRACE_ENV, "")
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> Optional[int]:
    raw = _os.environ.get(name)
    if raw is None or not raw.strip():
        return None

    try:
        value = int(raw.strip())
    except ValueError:
        return None

    return value if value > 0 else None


def max_depth_from_env() -> int:
    value = _env_int(MAX_DEPTH_ENV)
    return DEFAULT_MAX_DEPTH if value is None else value


def max_iterations_from_env() -> Optional[int]:
    """None means loops may run forever."""
    return _env_int(MAX_ITERATIONS_ENV)
