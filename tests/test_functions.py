from __future__ import annotations

import io

import pytest

from tests.support.harness import (
    Environment,
    RinClosure,
    RinhaArgumentError,
    RinhaArityError,
    RinhaUnknownIdentifier,
    run_output_case,
    run_program,
    run_runtime_case,
    parse_source,
    span_of,
)
from rinha_ref.evaluator import eval_expr
from rinha_ref.runner import run

FIB = "let fib = fn (n) => { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } }; "

SCENARIOS = [
    pytest.param("fn (x) => { x }", ("closure", None), None, id="literal-is-closure"),
    pytest.param("fn () => { 1 / 0 }", ("closure", None), None, id="body-not-evaluated"),
    pytest.param("fn () => { undefined }", ("closure", None), None, id="body-names-not-resolved"),
    pytest.param("let id = fn (x) => { x }; id(7)", ("int", 7), None, id="identity"),
    pytest.param("let k = fn () => { 42 }; k()", ("int", 42), None, id="zero-params"),
    pytest.param("let sub = fn (a, b) => { a - b }; sub(10, 3)", ("int", 7), None, id="argument-order"),
    pytest.param("(fn (x) => { x * 2 })(21)", ("int", 42), None, id="immediate-call"),
    pytest.param("let add = fn (a) => { fn (b) => { a + b } }; add(1)(2)", ("int", 3), None, id="currying"),
    pytest.param(
        "let add = fn (a) => { fn (b) => { a + b } }; let inc = add(1); let dec = add(0 - 1); (inc(10), dec(10))",
        ("tuple", "(11, 9)"),
        None,
        id="closures-keep-their-own-arguments",
    ),
    pytest.param(FIB + "fib(10)", ("int", 55), None, id="fib-10"),
    pytest.param(FIB + "fib(20)", ("int", 6765), None, id="fib-20"),
    pytest.param(
        "let sum = fn (n) => { if (n == 0) { 0 } else { n + sum(n - 1) } }; sum(100)",
        ("int", 5050),
        None,
        id="recursive-sum",
    ),
    pytest.param(
        "let twice = fn (f, x) => { f(f(x)) }; twice(fn (n) => { n * 3 }, 2)",
        ("int", 18),
        None,
        id="higher-order",
    ),
    pytest.param("let x = 1; let f = fn () => { x }; f()", ("int", 1), None, id="captures-outer"),
    pytest.param("let f = fn (x) => { x }; f()", None, RinhaArityError, id="too-few-args"),
    pytest.param("let f = fn (x) => { x }; f(1, 2)", None, RinhaArityError, id="too-many-args"),
    pytest.param("let f = fn () => { 1 }; f(1)", None, RinhaArityError, id="zero-params-given-one"),
    pytest.param("1(2)", None, RinhaArgumentError, id="int-not-callable"),
    pytest.param('"f"()', None, RinhaArgumentError, id="string-not-callable"),
    pytest.param("g(1)", None, RinhaUnknownIdentifier, id="unknown-callee"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_arguments_evaluate_left_to_right_in_caller_scope() -> None:
    run_output_case('let f = fn (a, b) => { b }; f(print("a"), print("b"))', "ab")


def test_arity_mismatch_evaluates_no_arguments(out: io.StringIO) -> None:
    with pytest.raises(RinhaArityError):
        run('let f = fn (x) => { x }; f(print("a"), print("b"))', out=out)

    assert out.getvalue() == ""


def test_arity_error_carries_call_and_function() -> None:
    source = "let f = fn (a, b) => { a }; f(1)"

    with pytest.raises(RinhaArityError) as exc_info:
        run_program(source)

    err = exc_info.value
    assert err.location == span_of(source, "f(1)")
    assert err.call.location == span_of(source, "f(1)")
    assert [p.text for p in err.function.parameters] == ["a", "b"]
    assert err.function.parameters_span() == span_of(source, "a, b")
    assert "expected 2, got 1" in err.message


def test_arity_error_does_not_bind_parameters(env: Environment) -> None:
    with pytest.raises(RinhaArityError):
        eval_expr(parse_source("let f = fn (x) => { x }; f(1, 2)"), env)

    closure = env.get("f")
    assert isinstance(closure, RinClosure)
    assert closure.env.vars == {}
    assert closure.env.get("x") is None


def test_not_a_function_points_at_call() -> None:
    source = "let n = 3; n(1)"

    with pytest.raises(RinhaArgumentError) as exc_info:
        run_program(source)

    assert exc_info.value.location == span_of(source, "n(1)")
    assert "not a function" in exc_info.value.message


def test_recursive_calls_do_not_share_parameters() -> None:
    source = (
        "let f = fn (n) => { if (n == 0) { 0 } else { let r = f(n - 1); n } }; "
        "f(3)"
    )

    assert run_program(source).value == 3


def test_closure_sees_bindings_made_after_capture() -> None:
    source = "let f = fn () => { later }; let later = 9; f()"

    assert run_program(source).value == 9


def test_call_result_is_closure_value() -> None:
    value = run_program("let mk = fn () => { fn (x) => { x } }; mk()")

    assert isinstance(value, RinClosure)
    assert [p.text for p in value.function.parameters] == ["x"]
