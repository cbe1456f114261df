"""Simplf: a small dynamically typed scripting language with a tree-walking evaluator."""

from .evaluator import Interpreter
from .parser import ParseError, parse_source
from .runner import parse, run
from .types import (
    Environment,
    SfBool,
    SfFunction,
    SfNil,
    SfNumber,
    SfString,
    SfValue,
    SimplfArityError,
    SimplfDivisionByZero,
    SimplfNotCallable,
    SimplfRuntimeError,
    SimplfTypeError,
    SimplfUndefinedVariable,
)

__all__ = [
    "Environment",
    "Interpreter",
    "ParseError",
    "SfBool",
    "SfFunction",
    "SfNil",
    "SfNumber",
    "SfString",
    "SfValue",
    "SimplfArityError",
    "SimplfDivisionByZero",
    "SimplfNotCallable",
    "SimplfRuntimeError",
    "SimplfTypeError",
    "SimplfUndefinedVariable",
    "parse",
    "parse_source",
    "run",
]
