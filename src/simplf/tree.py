"""Expression and statement nodes handed to the evaluator.

The parser builds these from source text; tests and embedders may build them
directly. Operator and name fields hold ``lark.Token`` values so that runtime
errors can point back at the source.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from lark import Token
from typing_extensions import TypeAlias

from .types import SfBool, SfNil, SfNumber, SfString, SfValue


class Expr:
    pass

class Stmt:
    pass

# ---------- Expressions ----------

@dataclass
class Literal(Expr):
    value: SfValue

@dataclass
class Grouping(Expr):
    expression: Expr

@dataclass
class Unary(Expr):
    op: Token
    right: Expr

@dataclass
class Binary(Expr):
    left: Expr
    op: Token
    right: Expr

@dataclass
class Logical(Expr):
    left: Expr
    op: Token  # AND | OR
    right: Expr

@dataclass
class Conditional(Expr):
    cond: Expr
    then_branch: Expr
    else_branch: Expr

@dataclass
class Variable(Expr):
    name: Token

@dataclass
class Assign(Expr):
    name: Token
    value: Expr

@dataclass
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Expr] = field(default_factory=list)

# ---------- Statements ----------

@dataclass
class Expression(Stmt):
    expression: Expr

@dataclass
class Print(Stmt):
    expression: Expr

@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None

@dataclass
class Block(Stmt):
    statements: List[Stmt] = field(default_factory=list)

@dataclass
class If(Stmt):
    cond: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

@dataclass
class While(Stmt):
    cond: Expr
    body: Stmt

@dataclass
class For(Stmt):
    """Surface form only; ``lower`` rewrites it into a Block around a While."""
    initializer: Optional[Stmt]
    cond: Optional[Expr]
    increment: Optional[Expr]
    body: Stmt

@dataclass
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]

@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None

Node: TypeAlias = Union[Expr, Stmt]

# ---------- Debug rendering ----------

def render(node: Union[Node, List[Stmt], None]) -> str:
    """Render a node (or statement list) as a parenthesised prefix form."""
    if node is None:
        return "nil"

    if isinstance(node, list):
        return "\n".join(render(stmt) for stmt in node)

    match node:
        case Literal(value=SfString(value=text)):
            return f'"{text}"'
        case Literal(value=value):
            return repr(value)
        case Grouping(expression=inner):
            return _paren("group", inner)
        case Unary(op=op, right=right):
            return _paren(str(op), right)
        case Binary(left=left, op=op, right=right) | Logical(left=left, op=op, right=right):
            return _paren(str(op), left, right)
        case Conditional(cond=cond, then_branch=then_branch, else_branch=else_branch):
            return _paren("?:", cond, then_branch, else_branch)
        case Variable(name=name):
            return str(name)
        case Assign(name=name, value=value):
            return _paren(f"= {name}", value)
        case Call(callee=callee, arguments=args):
            return _paren("call", callee, *args)
        case Expression(expression=expr):
            return _paren(";", expr)
        case Print(expression=expr):
            return _paren("print", expr)
        case Var(name=name, initializer=None):
            return f"(var {name})"
        case Var(name=name, initializer=init):
            return _paren(f"var {name}", init)
        case Block(statements=stmts):
            return _paren("block", *stmts)
        case If(cond=cond, then_branch=then_branch, else_branch=None):
            return _paren("if", cond, then_branch)
        case If(cond=cond, then_branch=then_branch, else_branch=else_branch):
            return _paren("if-else", cond, then_branch, else_branch)
        case While(cond=cond, body=body):
            return _paren("while", cond, body)
        case For(initializer=init, cond=cond, increment=incr, body=body):
            return _paren("for", init, cond, incr, body)
        case Function(name=name, params=params, body=body):
            names = " ".join(str(p) for p in params)
            return _paren(f"fun {name} ({names})", *body)
        case Return(value=None):
            return "(return)"
        case Return(value=value):
            return _paren("return", value)

    raise TypeError(f"Cannot render {type(node).__name__}")

def _paren(head: str, *parts: Optional[Node]) -> str:
    return "(" + " ".join([head] + [render(part) for part in parts]) + ")"

def literal_of(raw: object) -> Literal:
    """Wrap a host value as a Literal node (None becomes nil)."""
    match raw:
        case None:
            return Literal(SfNil())
        case bool():
            return Literal(SfBool(raw))
        case int() | float():
            return Literal(SfNumber(float(raw)))
        case str():
            return Literal(SfString(raw))

    raise TypeError(f"No literal form for {type(raw).__name__}")
