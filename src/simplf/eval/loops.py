from __future__ import annotations

from typing import TYPE_CHECKING

from ..lower import desugar_for
from ..tree import For, If, While
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_if(stmt: If, interp: 'Interpreter') -> None:
    if is_truthy(interp.evaluate(stmt.cond)):
        interp.execute(stmt.then_branch)
    elif stmt.else_branch is not None:
        interp.execute(stmt.else_branch)

def exec_while(stmt: While, interp: 'Interpreter') -> None:
    while is_truthy(interp.evaluate(stmt.cond)):
        interp.execute(stmt.body)

def exec_for(stmt: For, interp: 'Interpreter') -> None:
    # Programs normally arrive lowered; a stray `for` runs as its lowered form.
    interp.execute(desugar_for(stmt))
