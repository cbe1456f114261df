from __future__ import annotations

import pytest

from simplf.eval.common import format_number, stringify
from simplf.eval.helpers import is_truthy
from simplf.tree import Binary, Literal, Print, literal_of
from simplf.utils import sf_equals

from tests.support.harness import (
    Environment,
    SfBool,
    SfFunction,
    SfNil,
    SfNumber,
    SfString,
    make_interpreter,
    tok,
)


@pytest.mark.parametrize(
    "value, text",
    [
        pytest.param(SfNil(), "nil", id="nil"),
        pytest.param(SfBool(True), "true", id="true"),
        pytest.param(SfBool(False), "false", id="false"),
        pytest.param(SfNumber(3.0), "3", id="integral"),
        pytest.param(SfNumber(-0.5), "-0.5", id="fraction"),
        pytest.param(SfNumber(100.0), "100", id="trailing-zeros-kept"),
        pytest.param(SfString("text"), "text", id="string-unquoted"),
        pytest.param(SfFunction("f", [], [], Environment()), "<fn f>", id="function"),
    ],
)
def test_stringify(value, text: str) -> None:
    assert stringify(value) == text


def test_format_number_only_strips_point_zero() -> None:
    assert format_number(10.0) == "10"
    assert format_number(10.05) == "10.05"


@pytest.mark.parametrize(
    "value, truthy",
    [
        pytest.param(SfNil(), False, id="nil"),
        pytest.param(SfBool(False), False, id="false"),
        pytest.param(SfBool(True), True, id="true"),
        pytest.param(SfNumber(0.0), True, id="zero"),
        pytest.param(SfString(""), True, id="empty-string"),
    ],
)
def test_truthiness(value, truthy: bool) -> None:
    assert is_truthy(value) is truthy


def test_equality_has_no_coercion() -> None:
    fn = SfFunction("f", [], [], Environment())

    assert sf_equals(SfNil(), SfNil())
    assert sf_equals(SfNumber(1.0), SfNumber(1.0))
    assert sf_equals(fn, fn)
    assert not sf_equals(fn, SfFunction("f", [], [], Environment()))
    assert not sf_equals(SfNumber(0.0), SfBool(False))
    assert not sf_equals(SfString("nil"), SfNil())
    assert not sf_equals(SfString("1"), SfNumber(1.0))


def test_number_equality_is_by_value_identity() -> None:
    nan = float("nan")

    assert sf_equals(SfNumber(nan), SfNumber(nan))
    assert not sf_equals(SfNumber(nan), SfNumber(1.0))
    assert not sf_equals(SfNumber(0.0), SfNumber(-0.0))
    assert sf_equals(SfNumber(-0.0), SfNumber(-0.0))


def test_hand_built_nodes_evaluate() -> None:
    interp, out, errors = make_interpreter()
    expr = Binary(literal_of(2), tok("*", kind="STAR"), literal_of(2.5))

    assert interp.evaluate(expr) == SfNumber(5.0)
    assert literal_of(None) == Literal(SfNil())
    assert literal_of(True) == Literal(SfBool(True))

    assert interp.interpret([Print(literal_of("done"))])
    assert out.getvalue() == "done\n"
    assert errors == []

    with pytest.raises(TypeError):
        literal_of([1])
