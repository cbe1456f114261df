from __future__ import annotations

from io import StringIO

import pytest

from simplf.types import SimplfReturnSignal

from tests.support.harness import (
    Interpreter,
    SimplfDivisionByZero,
    SimplfRuntimeError,
    SimplfTypeError,
    SimplfUndefinedVariable,
    lower,
    make_interpreter,
    parse_source,
    run_source,
)

MESSAGE_CASES = [
    ("negate-string", 'print -"a";', SimplfTypeError, "Operand must be a number."),
    ("sub-nil", "print 1 - nil;", SimplfTypeError, "Operands must be numbers."),
    ("plus-bool", "print true + 1;", SimplfTypeError, "Operands must be two numbers or at least one string."),
    ("div-zero", "print 4 / 0;", SimplfDivisionByZero, "Division by zero."),
    ("undefined-read", "print q;", SimplfUndefinedVariable, "Undefined variable 'q'."),
    ("undefined-write", "q = 1;", SimplfUndefinedVariable, "Undefined variable 'q'."),
]


@pytest.mark.parametrize(
    "name,source,exc_type,message",
    MESSAGE_CASES,
    ids=[c[0] for c in MESSAGE_CASES],
)
def test_runtime_error_messages(name: str, source: str, exc_type: type, message: str) -> None:
    result = run_source(source)

    assert len(result.errors) == 1
    err = result.errors[0]
    assert isinstance(err, exc_type)
    assert err.message == message


def test_error_carries_token_position() -> None:
    result = run_source("var a = 1;\nprint q;")

    err = result.errors[0]
    assert err.line == 2
    assert str(err) == "Undefined variable 'q'. (line 2, col 7)"


def test_operator_error_points_at_operator() -> None:
    result = run_source('print 1 +\n  "a" - 2;')

    err = result.errors[0]
    assert isinstance(err, SimplfTypeError)
    assert str(err.token) == "-"
    assert err.line == 2


def test_error_aborts_remaining_statements_but_keeps_effects() -> None:
    interp, _, _ = make_interpreter()

    result = run_source("var a = 1; print a; a = nope; print 2;", interp)

    assert result.lines == ["1"]
    assert not result.ok
    assert interp.environment.lookup("a").value.value == 1


def test_default_reporter_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    interp = Interpreter(out=StringIO())

    ok = interp.interpret(lower(parse_source("\nprint 1 / 0;")))

    assert not ok
    captured = capsys.readouterr()
    assert captured.err == "Division by zero.\n[line 2]\n"


def test_unknown_node_is_a_runtime_error() -> None:
    interp, _, _ = make_interpreter()

    with pytest.raises(SimplfRuntimeError):
        interp.execute(object())

    with pytest.raises(SimplfRuntimeError):
        interp.evaluate(object())


def test_return_signal_is_not_a_runtime_error() -> None:
    assert not issubclass(SimplfReturnSignal, SimplfRuntimeError)
