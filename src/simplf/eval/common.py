from __future__ import annotations

from typing import Any, Optional, Tuple

from lark import Token

from ..types import SfBool, SfFunction, SfNil, SfNumber, SfString, SimplfTypeError


def token_kind(node: Any) -> Optional[str]:
    if not isinstance(node, Token):
        return None
    return str(node.type)

def require_number(op: Token, value: Any) -> float:
    if isinstance(value, SfNumber):
        return value.value

    raise SimplfTypeError(op, "Operand must be a number.")

def require_numbers(op: Token, lhs: Any, rhs: Any) -> Tuple[float, float]:
    if isinstance(lhs, SfNumber) and isinstance(rhs, SfNumber):
        return lhs.value, rhs.value

    raise SimplfTypeError(op, "Operands must be numbers.")

def format_number(value: float) -> str:
    text = str(value)

    if text.endswith(".0"):
        return text[:-2]

    return text

def stringify(value: Any) -> str:
    """Display text used by print and by string concatenation."""
    match value:
        case None | SfNil():
            return "nil"
        case SfBool(value=b):
            return "true" if b else "false"
        case SfNumber(value=num):
            return format_number(num)
        case SfString(value=text):
            return text
        case SfFunction(name=name):
            return f"<fn {name}>"

    return str(value)
