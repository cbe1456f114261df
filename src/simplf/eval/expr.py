from __future__ import annotations

from typing import Callable

from lark import Token

from ..tree import Binary, Conditional, Expr, Logical, Unary
from ..types import (
    SfBool,
    SfNumber,
    SfString,
    SfValue,
    SimplfDivisionByZero,
    SimplfRuntimeError,
    SimplfTypeError,
)
from ..utils import sf_equals
from .common import require_number, require_numbers, stringify, token_kind
from .helpers import is_truthy

EvalFunc = Callable[[Expr], SfValue]

def eval_unary(expr: Unary, eval_func: EvalFunc) -> SfValue:
    rhs = eval_func(expr.right)

    match token_kind(expr.op):
        case 'MINUS':
            return SfNumber(-require_number(expr.op, rhs))
        case 'BANG':
            return SfBool(not is_truthy(rhs))
        case _:
            raise SimplfRuntimeError(expr.op, f"Unsupported unary operator '{expr.op}'.")

def eval_binary(expr: Binary, eval_func: EvalFunc) -> SfValue:
    lhs = eval_func(expr.left)
    rhs = eval_func(expr.right)

    return apply_binary_operator(expr.op, lhs, rhs)

def apply_binary_operator(op: Token, lhs: SfValue, rhs: SfValue) -> SfValue:
    match token_kind(op):
        case 'PLUS':
            if isinstance(lhs, SfString) or isinstance(rhs, SfString):
                return SfString(stringify(lhs) + stringify(rhs))
            if isinstance(lhs, SfNumber) and isinstance(rhs, SfNumber):
                return SfNumber(lhs.value + rhs.value)
            raise SimplfTypeError(op, "Operands must be two numbers or at least one string.")
        case 'MINUS':
            a, b = require_numbers(op, lhs, rhs)
            return SfNumber(a - b)
        case 'STAR':
            a, b = require_numbers(op, lhs, rhs)
            return SfNumber(a * b)
        case 'SLASH':
            a, b = require_numbers(op, lhs, rhs)
            if b == 0:
                raise SimplfDivisionByZero(op, "Division by zero.")
            return SfNumber(a / b)
        case 'GREATER':
            a, b = require_numbers(op, lhs, rhs)
            return SfBool(a > b)
        case 'GREATER_EQUAL':
            a, b = require_numbers(op, lhs, rhs)
            return SfBool(a >= b)
        case 'LESS':
            a, b = require_numbers(op, lhs, rhs)
            return SfBool(a < b)
        case 'LESS_EQUAL':
            a, b = require_numbers(op, lhs, rhs)
            return SfBool(a <= b)
        case 'EQUAL_EQUAL':
            return SfBool(sf_equals(lhs, rhs))
        case 'BANG_EQUAL':
            return SfBool(not sf_equals(lhs, rhs))

    raise SimplfRuntimeError(op, f"Unknown operator '{op}'.")

def eval_logical(expr: Logical, eval_func: EvalFunc) -> SfValue:
    """Short-circuit; yields the deciding operand itself, not a coerced boolean."""
    lhs = eval_func(expr.left)

    if token_kind(expr.op) == 'OR':
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return eval_func(expr.right)

def eval_conditional(expr: Conditional, eval_func: EvalFunc) -> SfValue:
    if is_truthy(eval_func(expr.cond)):
        return eval_func(expr.then_branch)

    return eval_func(expr.else_branch)
