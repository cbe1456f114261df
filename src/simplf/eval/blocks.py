from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..tree import Block, Expression, Print, Stmt, Var
from ..types import Environment, SfNil
from .common import stringify

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def execute_statements(statements: List[Stmt], environment: Environment, interp: 'Interpreter') -> None:
    """Run `statements` with `environment` current; the previous one comes back however they exit."""
    previous = interp.environment
    interp.environment = environment

    try:
        for stmt in statements:
            interp.execute(stmt)
    finally:
        interp.environment = previous

def exec_block(stmt: Block, interp: 'Interpreter') -> None:
    interp.execute_block(stmt.statements, Environment(parent=interp.environment))

def exec_var(stmt: Var, interp: 'Interpreter') -> None:
    value = interp.evaluate(stmt.initializer) if stmt.initializer is not None else SfNil()
    # Later statements run in the extended environment; earlier captures keep the old one.
    interp.environment = interp.environment.define(stmt.name, value)

def exec_expression(stmt: Expression, interp: 'Interpreter') -> None:
    interp.evaluate(stmt.expression)

def exec_print(stmt: Print, interp: 'Interpreter') -> None:
    interp.emit(stringify(interp.evaluate(stmt.expression)))
