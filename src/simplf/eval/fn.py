from __future__ import annotations

from typing import TYPE_CHECKING, List

from lark import Token

from ..tree import Call, Function, Return
from ..types import (
    Environment,
    SfFunction,
    SfNil,
    SfValue,
    SimplfArityError,
    SimplfNotCallable,
    SimplfReturnSignal,
    SimplfRuntimeError,
)

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_function(stmt: Function, interp: 'Interpreter') -> None:
    name = str(stmt.name)
    # Bind the name first so the body can see itself, then fill the cell.
    env = interp.environment.define(name, SfNil())
    fn_value = SfFunction(
        name=name,
        params=[str(p) for p in stmt.params],
        body=stmt.body,
        closure=env,
    )
    env.bindings.value = fn_value
    interp.environment = env

def exec_return(stmt: Return, interp: 'Interpreter') -> None:
    if interp.call_depth == 0:
        raise SimplfRuntimeError(stmt.keyword, "Can't return from top-level code.")

    value = interp.evaluate(stmt.value) if stmt.value is not None else SfNil()

    raise SimplfReturnSignal(value)

def eval_call(expr: Call, interp: 'Interpreter') -> SfValue:
    callee = interp.evaluate(expr.callee)

    if not isinstance(callee, SfFunction):
        raise SimplfNotCallable(expr.paren, "Can only call functions.")

    args = [interp.evaluate(arg) for arg in expr.arguments]

    return call_function(callee, args, expr.paren, interp)

def call_function(fn: SfFunction, args: List[SfValue], paren: Token, interp: 'Interpreter') -> SfValue:
    if len(args) != fn.arity():
        raise SimplfArityError(paren, fn.arity(), len(args))

    callee_env = Environment(parent=fn.closure)

    for name, value in zip(fn.params, args):
        callee_env = callee_env.define(name, value)

    interp.call_depth += 1

    try:
        interp.execute_block(fn.body, callee_env)
    except SimplfReturnSignal as signal:
        return signal.value
    finally:
        interp.call_depth -= 1

    return SfNil()
