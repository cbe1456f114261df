from __future__ import annotations
from typing import List, Optional

from .tree import Block, Expression, For, Function, If, Literal, Stmt, While
from .types import SfBool


def lower(statements: List[Stmt]) -> List[Stmt]:
    """Runtime lowering pass: rewrite every `for` into its block/while form."""
    return [lower_stmt(stmt) for stmt in statements]


def lower_stmt(stmt: Stmt) -> Stmt:
    match stmt:
        case For():
            return desugar_for(stmt)
        case Block(statements=body):
            return Block(lower(body))
        case If(cond=cond, then_branch=then_branch, else_branch=else_branch):
            return If(cond, lower_stmt(then_branch), _lower_optional(else_branch))
        case While(cond=cond, body=body):
            return While(cond, lower_stmt(body))
        case Function(name=name, params=params, body=body):
            return Function(name, params, lower(body))
        case _:
            return stmt


def desugar_for(stmt: For) -> Block:
    """
    for (init; cond; incr) body   =>   { init; while (cond) { body; incr; } }

    A missing condition loops forever; a missing initializer or increment is
    simply left out. The outer block keeps the loop variable out of the
    enclosing scope.
    """
    body = lower_stmt(stmt.body)

    if stmt.increment is not None:
        body = Block([body, Expression(stmt.increment)])

    cond = stmt.cond if stmt.cond is not None else Literal(SfBool(True))
    loop = While(cond, body)

    if stmt.initializer is None:
        return Block([loop])

    return Block([lower_stmt(stmt.initializer), loop])


def _lower_optional(stmt: Optional[Stmt]) -> Optional[Stmt]:
    return lower_stmt(stmt) if stmt is not None else None
