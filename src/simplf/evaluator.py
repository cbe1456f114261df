from __future__ import annotations

import sys
from typing import Callable, Iterable, List, Optional, TextIO

from .tree import (
    Assign,
    Binary,
    Block,
    Call,
    Conditional,
    Expr,
    Expression,
    For,
    Function,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from .types import Environment, SfValue, SimplfRuntimeError

from .eval.blocks import exec_block, exec_expression, exec_print, exec_var, execute_statements
from .eval.expr import eval_binary, eval_conditional, eval_logical, eval_unary
from .eval.fn import eval_call, exec_function, exec_return
from .eval.loops import exec_for, exec_if, exec_while

ErrorReporter = Callable[[SimplfRuntimeError], None]


class Interpreter:
    """
    Tree-walking evaluator.

    `environment` is the environment in effect for the statement being run.
    A `var` or `fun` declaration replaces it with the extended environment
    returned by `Environment.define`; blocks and calls swap it for the
    duration of their body and put the previous one back on the way out.
    """

    def __init__(self, out: Optional[TextIO]=None, reporter: Optional[ErrorReporter]=None):
        self.environment = Environment()
        self.out = out
        self.reporter = reporter
        self.call_depth = 0

    # ---------------- Public API ----------------

    def interpret(self, statements: Iterable[Stmt]) -> bool:
        """Run top-level statements in order. Returns False if a runtime error stopped the run."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except SimplfRuntimeError as err:
            self._report(err)
            return False

        return True

    # ---------------- Core evaluator ----------------

    def execute(self, stmt: Stmt) -> None:
        handler = _STMT_DISPATCH.get(type(stmt))
        if handler is None:
            raise SimplfRuntimeError(None, f"Unknown statement: {type(stmt).__name__}")

        handler(stmt, self)

    def evaluate(self, expr: Expr) -> SfValue:
        handler = _EXPR_DISPATCH.get(type(expr))
        if handler is None:
            raise SimplfRuntimeError(None, f"Unknown expression: {type(expr).__name__}")

        return handler(expr, self)

    def execute_block(self, statements: List[Stmt], environment: Environment) -> None:
        """Run a block or call body with `environment` current, restoring the caller's afterwards."""
        execute_statements(statements, environment, self)

    def emit(self, text: str) -> None:
        print(text, file=self.out if self.out is not None else sys.stdout)

    def _report(self, err: SimplfRuntimeError) -> None:
        if self.reporter is not None:
            self.reporter(err)
            return

        print(err.message, file=sys.stderr)
        if err.line is not None:
            print(f"[line {err.line}]", file=sys.stderr)

# ---------------- Leaf expressions ----------------

def _eval_literal(expr: Literal, interp: Interpreter) -> SfValue:
    return expr.value

def _eval_variable(expr: Variable, interp: Interpreter) -> SfValue:
    return interp.environment.get(expr.name)

def _eval_assign(expr: Assign, interp: Interpreter) -> SfValue:
    value = interp.evaluate(expr.value)
    interp.environment.assign(expr.name, value)
    return value

# ---------------- Dispatch ----------------

_EXPR_DISPATCH: dict[type, Callable[[Expr, Interpreter], SfValue]] = {
    Literal: _eval_literal,
    Grouping: lambda e, interp: interp.evaluate(e.expression),
    Variable: _eval_variable,
    Assign: _eval_assign,
    Unary: lambda e, interp: eval_unary(e, interp.evaluate),
    Binary: lambda e, interp: eval_binary(e, interp.evaluate),
    Logical: lambda e, interp: eval_logical(e, interp.evaluate),
    Conditional: lambda e, interp: eval_conditional(e, interp.evaluate),
    Call: eval_call,
}

_STMT_DISPATCH: dict[type, Callable[[Stmt, Interpreter], None]] = {
    Expression: exec_expression,
    Print: exec_print,
    Var: exec_var,
    Block: exec_block,
    If: exec_if,
    While: exec_while,
    For: exec_for,
    Function: exec_function,
    Return: exec_return,
}
