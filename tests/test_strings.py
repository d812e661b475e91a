from __future__ import annotations

import io

import pytest

from tests.support.harness import (
    Environment,
    RinBool,
    RinClosure,
    RinInt,
    RinStr,
    RinTuple,
    run_output_case,
    run_runtime_case,
    run_with_output,
)
from rinha_ref.evaluator import eval_expr
from rinha_ref.parser import parse_source
from rinha_ref.utils import stringify

SCENARIOS = [
    pytest.param('"hello" + " world"', ("string", "hello world"), None, id="concat-str-str"),
    pytest.param('"n = " + 1', ("string", "n = 1"), None, id="concat-str-int"),
    pytest.param('1 + "x"', ("string", "1x"), None, id="concat-int-str"),
    pytest.param('"1 + 2 = " + 1 + 2', ("string", "1 + 2 = 12"), None, id="concat-left-to-right"),
    pytest.param('"1 + 2 = " + (1 + 2)', ("string", "1 + 2 = 3"), None, id="concat-grouped-sum"),
    pytest.param('true + "!"', ("string", "true!"), None, id="concat-bool-str"),
    pytest.param("true + false", ("string", "truefalse"), None, id="concat-bool-bool"),
    pytest.param("1 + true", ("string", "1true"), None, id="concat-int-bool"),
    pytest.param('(1, "a") + "!"', ("string", "(1, a)!"), None, id="concat-tuple"),
    pytest.param('"f: " + fn () => { 1 }', ("string", "f: <#closure>"), None, id="concat-closure"),
    pytest.param(r'"a\tb\n"', ("string", "a\tb\n"), None, id="escapes"),
    pytest.param(r'"say \"hi\""', ("string", 'say "hi"'), None, id="escaped-quote"),
    pytest.param('""', ("string", ""), None, id="empty"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_strings(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


PRINT_SCENARIOS = [
    pytest.param('print("hello")', "hello", id="print-str"),
    pytest.param("print(1 + 2)", "3", id="print-int"),
    pytest.param("print(1 == 1)", "true", id="print-true"),
    pytest.param("print(1 == 2)", "false", id="print-false"),
    pytest.param("print((1, false))", "(1, false)", id="print-tuple"),
    pytest.param('print(((1, "x"), (true, 2)))', "((1, x), (true, 2))", id="print-nested-tuple"),
    pytest.param("let f = fn () => { 1 }; print(f)", "<#closure>", id="print-closure"),
    pytest.param("print(print(1))", "11", id="print-nested"),
    pytest.param('let _ = print("a"); print("b")', "ab", id="print-sequence"),
    pytest.param('print("1 + 2 = " + (1 + 2))', "1 + 2 = 3", id="print-concat"),
]


@pytest.mark.parametrize("source, expected_output", PRINT_SCENARIOS)
def test_print_output(source: str, expected_output: str) -> None:
    run_output_case(source, expected_output)


def test_print_returns_its_operand() -> None:
    value, output = run_with_output("print(print(1))")

    assert value == RinInt(1)
    assert output == "11"


def test_print_end_is_configurable(session_env: Environment, out: io.StringIO) -> None:
    eval_expr(parse_source("print(print(1))"), session_env)

    assert out.getvalue() == "1\n1\n"


@pytest.mark.parametrize(
    "value, expected",
    [
        (RinInt(-42), "-42"),
        (RinBool(True), "true"),
        (RinBool(False), "false"),
        (RinStr("verbatim \"text\""), 'verbatim "text"'),
        (RinTuple(RinInt(1), RinTuple(RinStr("a"), RinBool(False))), "(1, (a, false))"),
    ],
)
def test_display(value, expected: str) -> None:
    assert stringify(value) == expected


def test_closure_display_is_opaque() -> None:
    value, _ = run_with_output("fn (a, b) => { a + b }")

    assert isinstance(value, RinClosure)
    assert stringify(value) == "<#closure>"
