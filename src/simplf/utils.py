from __future__ import annotations

import math
import os as _os

from .types import SfBool, SfFunction, SfNil, SfNumber, SfString, SfValue

DEBUG_PY_TRACE_ENV = "SIMPLF_DEBUG_PY_TRACE"


def sf_equals(lhs: SfValue, rhs: SfValue) -> bool:
    """Structural equality with no coercion between kinds."""
    match (lhs, rhs):
        case (SfNil(), SfNil()):
            return True
        case (SfNumber(value=a), SfNumber(value=b)):
            return same_number(a, b)
        case (SfString(value=a), SfString(value=b)):
            return a == b
        case (SfBool(value=a), SfBool(value=b)):
            return a == b
        case (SfFunction(), SfFunction()):
            return lhs is rhs
        case _:
            return False


def same_number(a: float, b: float) -> bool:
    """Bitwise-style number identity: NaN equals NaN, 0 and -0 differ."""
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)

    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


def debug_py_trace_enabled() -> bool:
    """True when runtime errors should also show the Python traceback."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in {"1", "true", "yes", "on"}


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)
