from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    SfFunction,
    SfNumber,
    SimplfArityError,
    SimplfNotCallable,
    SimplfRuntimeError,
    SimplfUndefinedVariable,
    make_interpreter,
    run_runtime_case,
    run_source,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            fun factorial(n) {
              if (n <= 1) return 1;
              return n * factorial(n - 1);
            }
            print factorial(5);
        """
        ),
        ["120"],
        None,
        id="recursive-factorial",
    ),
    pytest.param(
        dedent(
            """\
            fun fib(n) {
              if (n < 2) return n;
              return fib(n - 1) + fib(n - 2);
            }
            print fib(10);
        """
        ),
        ["55"],
        None,
        id="recursive-fib",
    ),
    pytest.param("fun f() {} print f();", ["nil"], None, id="no-return-yields-nil"),
    pytest.param(
        'fun f() { return; print "unreached"; } print f();',
        ["nil"],
        None,
        id="bare-return",
    ),
    pytest.param(
        dedent(
            """\
            fun first() {
              for (var i = 0; i < 10; i = i + 1) {
                if (i == 3) return i;
              }
            }
            print first();
        """
        ),
        ["3"],
        None,
        id="return-from-loop",
    ),
    pytest.param(
        dedent(
            """\
            fun adder(n) {
              fun add(x) { return x + n; }
              return add;
            }
            print adder(2)(3);
            print adder;
        """
        ),
        ["5", "<fn adder>"],
        None,
        id="closure-over-parameter",
    ),
    pytest.param(
        dedent(
            """\
            var log = "";
            fun t(x) { log = log + x; return x; }
            fun f(a, b, c) { return a + b + c; }
            print f(t("a"), t("b"), t("c"));
            print log;
        """
        ),
        ["abc", "abc"],
        None,
        id="arguments-left-to-right",
    ),
    pytest.param(
        dedent(
            """\
            var a = "outer";
            fun f(a) { a = "param"; return a; }
            print f(1);
            print a;
        """
        ),
        ["param", "outer"],
        None,
        id="parameter-shadows-outer",
    ),
    pytest.param(
        dedent(
            """\
            var isOdd;
            fun isEven(n) {
              if (n == 0) return true;
              return isOdd(n - 1);
            }
            fun odd(n) {
              if (n == 0) return false;
              return isEven(n - 1);
            }
            isOdd = odd;
            print isEven(4);
            print isEven(7);
        """
        ),
        ["true", "false"],
        None,
        id="mutual-recursion-forward-var",
    ),
    pytest.param(
        dedent(
            """\
            fun a() { return b(); }
            fun b() { return 1; }
            print a();
        """
        ),
        [],
        SimplfUndefinedVariable,
        id="later-function-not-captured",
    ),
    pytest.param("fun f(a, b) {} f(1);", [], SimplfArityError, id="arity-too-few"),
    pytest.param("fun f() {} f(1);", [], SimplfArityError, id="arity-too-many"),
    pytest.param('"str"();', [], SimplfNotCallable, id="call-string"),
    pytest.param("var x = 1; x();", [], SimplfNotCallable, id="call-number"),
    pytest.param("nil(missing);", [], SimplfNotCallable, id="callee-checked-before-arguments"),
    pytest.param("return 1;", [], SimplfRuntimeError, id="top-level-return"),
]


@pytest.mark.parametrize("source, expected_lines, expected_exc", SCENARIOS)
def test_functions(source: str, expected_lines, expected_exc) -> None:
    run_runtime_case(source, expected_lines, expected_exc)


def test_arity_error_message_and_position() -> None:
    result = run_source("fun f(a, b) {}\n\nf(1);")

    err = result.errors[0]
    assert isinstance(err, SimplfArityError)
    assert err.message == "Expected 2 arguments but got 1."
    assert (err.expected, err.got) == (2, 1)
    assert err.line == 3
    assert err.token.type == "RIGHT_PAREN"


def test_not_callable_message() -> None:
    result = run_source("true();")

    assert result.errors[0].message == "Can only call functions."


def test_top_level_return_message() -> None:
    result = run_source("print 1;\nreturn;")

    assert result.lines == ["1"]
    assert result.errors[0].message == "Can't return from top-level code."
    assert result.errors[0].line == 2


def test_call_depth_restored_after_error_in_call() -> None:
    interp, _, _ = make_interpreter()

    result = run_source("fun f() { return missing; } f();", interp)

    assert not result.ok
    assert interp.call_depth == 0


def test_function_value_captures_declaration_environment() -> None:
    interp, _, _ = make_interpreter()
    run_source("var a = 1; fun f(x) { return x; }", interp)

    fn = interp.environment.lookup("f").value
    assert isinstance(fn, SfFunction)
    assert fn.params == ["x"]
    assert fn.arity() == 1
    assert fn.closure.lookup("f").value is fn
    assert fn.closure.lookup("a").value == SfNumber(1)
