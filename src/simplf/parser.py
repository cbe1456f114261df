from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, v_args

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
from .types import SfBool, SfNil, SfNumber, SfString

GRAMMAR_PATH = Path(__file__).resolve().parent / "grammar.lark"


class ParseError(Exception):
    """Parse error with position info"""

    def __init__(self, message: str, line: Optional[int]=None, column: Optional[int]=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message

        return f"[line {self.line}] {self.message}"


def _read_grammar(grammar_path: Optional[str]=None) -> str:
    path = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    return path.read_text(encoding="utf-8")

@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    return Lark(
        _read_grammar(grammar_path),
        parser="lalr",
        lexer="basic",
        start="start",
        maybe_placeholders=True,
        propagate_positions=True,
    )


class AstBuilder(Transformer):
    """Turn lark parse trees into simplf.tree nodes."""

    def start(self, children: List[Stmt]) -> List[Stmt]:
        return list(children)

    # ---------- declarations / statements ----------

    def fun_decl(self, children) -> Function:
        name, params, body = children
        return Function(name, params or [], body.statements)

    def params(self, children: List[Token]) -> List[Token]:
        return list(children)

    def var_decl(self, children) -> Var:
        name, initializer = children
        return Var(name, initializer)

    def expr_stmt(self, children) -> Expression:
        return Expression(children[0])

    def for_stmt(self, children) -> For:
        initializer, cond, increment, body = children
        return For(initializer, cond, increment, body)

    def for_init(self, children) -> Stmt:
        return children[0]

    def no_init(self, _children) -> None:
        return None

    def if_stmt(self, children) -> If:
        cond, then_branch, else_branch = children
        return If(cond, then_branch, else_branch)

    def print_stmt(self, children) -> Print:
        return Print(children[0])

    def return_stmt(self, children) -> Return:
        keyword, value = children
        return Return(keyword, value)

    def while_stmt(self, children) -> While:
        cond, body = children
        return While(cond, body)

    def block(self, children: List[Stmt]) -> Block:
        return Block(list(children))

    # ---------- expressions ----------

    def assign(self, children) -> Assign:
        name, value = children
        return Assign(name, value)

    def ternary(self, children) -> Conditional:
        cond, then_branch, else_branch = children
        return Conditional(cond, then_branch, else_branch)

    def logical(self, children) -> Logical:
        left, op, right = children
        return Logical(left, op, right)

    def binary(self, children) -> Binary:
        left, op, right = children
        return Binary(left, op, right)

    def unary(self, children) -> Unary:
        op, right = children
        return Unary(op, right)

    @v_args(meta=True)
    def call_expr(self, meta, children) -> Call:
        callee, arguments = children
        # Errors from a call point at its closing parenthesis.
        paren = Token(
            "RIGHT_PAREN",
            ")",
            line=getattr(meta, "end_line", None),
            column=_paren_column(meta),
        )
        return Call(callee, paren, arguments or [])

    def arguments(self, children: List[Expr]) -> List[Expr]:
        return list(children)

    def grouping(self, children) -> Grouping:
        return Grouping(children[0])

    def variable(self, children) -> Variable:
        return Variable(children[0])

    def number(self, children) -> Literal:
        return Literal(SfNumber(float(children[0])))

    def string(self, children) -> Literal:
        return Literal(SfString(str(children[0])[1:-1]))

    def true(self, _children) -> Literal:
        return Literal(SfBool(True))

    def false(self, _children) -> Literal:
        return Literal(SfBool(False))

    def nil(self, _children) -> Literal:
        return Literal(SfNil())

def _paren_column(meta) -> Optional[int]:
    end_column = getattr(meta, "end_column", None)
    return end_column - 1 if end_column is not None else None


def parse_source(source: str) -> List[Stmt]:
    """Parse a whole program. Raises ParseError; nothing is returned on failure."""
    try:
        tree = make_parser().parse(source)
    except UnexpectedInput as exc:
        raise _parse_error(exc) from None

    return AstBuilder().transform(tree)

def _parse_error(exc: UnexpectedInput) -> ParseError:
    match exc:
        case UnexpectedEOF():
            return ParseError("Error at end: unexpected end of input.", None, None)
        case UnexpectedToken(token=token) if token.type == "$END":
            return ParseError("Error at end: unexpected end of input.", _position(exc.line), None)
        case UnexpectedToken(token=token):
            return ParseError(f"Error at '{token}': unexpected token.", token.line, token.column)
        case UnexpectedCharacters(char=char):
            return ParseError(f"Error at '{char}': unexpected character.", _position(exc.line), _position(exc.column))

    return ParseError(str(exc), getattr(exc, "line", None), getattr(exc, "column", None))

def _position(value: object) -> Optional[int]:
    # lark reports unknown positions as -1 or "?"
    return value if isinstance(value, int) and value > 0 else None
