from __future__ import annotations

import pytest

from tests.support.harness import RinhaSyntaxError, Span, parse_source, span_of
from rinha_ref.parser import ToTerms, decode_string, parse_file
from rinha_ref.tree import (
    Binary,
    BinaryOp,
    Bool,
    Call,
    First,
    Function,
    If,
    Int,
    Let,
    Print,
    Second,
    Str,
    Tuple,
    Var,
    walk,
)


@pytest.mark.parametrize(
    "source, node_type",
    [
        ("1", Int),
        ('"s"', Str),
        ("true", Bool),
        ("false", Bool),
        ("x", Var),
        ("print(1)", Print),
        ("first(p)", First),
        ("second(p)", Second),
        ("(1, 2)", Tuple),
        ("(1)", Int),
        ("fn () => { 1 }", Function),
        ("f(1, 2)", Call),
        ("if (c) { 1 } else { 2 }", If),
        ("let x = 1; x", Let),
        ("1 + 2", Binary),
    ],
)
def test_parse_node_types(source: str, node_type: type) -> None:
    assert isinstance(parse_source(source), node_type)


@pytest.mark.parametrize(
    "source, op",
    [(f"a {op.symbol} b", op) for op in BinaryOp],
)
def test_every_operator_parses(source: str, op: BinaryOp) -> None:
    term = parse_source(source)

    assert isinstance(term, Binary)
    assert term.op is op


def test_multiplication_binds_tighter_than_addition() -> None:
    term = parse_source("1 + 2 * 3")

    assert isinstance(term, Binary) and term.op is BinaryOp.ADD
    assert isinstance(term.rhs, Binary) and term.rhs.op is BinaryOp.MUL


def test_subtraction_is_left_associative() -> None:
    term = parse_source("10 - 3 - 2")

    assert isinstance(term, Binary) and term.op is BinaryOp.SUB
    assert isinstance(term.lhs, Binary)
    assert isinstance(term.rhs, Int) and term.rhs.value == 2


def test_precedence_ladder() -> None:
    term = parse_source("a || b && c == d < e + f * g")

    ops = [n.op for n in walk(term) if isinstance(n, Binary)]
    assert ops == [
        BinaryOp.OR,
        BinaryOp.AND,
        BinaryOp.EQ,
        BinaryOp.LT,
        BinaryOp.ADD,
        BinaryOp.MUL,
    ]


def test_call_chains_apply_left_to_right() -> None:
    term = parse_source("f(1)(2)")

    assert isinstance(term, Call)
    assert isinstance(term.callee, Call)
    assert isinstance(term.callee.callee, Var)


def test_let_body_extends_to_end() -> None:
    term = parse_source("let x = 1; let y = 2; x + y")

    assert isinstance(term, Let) and term.name.text == "x"
    assert isinstance(term.next, Let) and term.next.name.text == "y"
    assert isinstance(term.next.next, Binary)


def test_function_parameters() -> None:
    source = "fn (a, bb, c) => { a }"
    term = parse_source(source)

    assert isinstance(term, Function)
    assert [p.text for p in term.parameters] == ["a", "bb", "c"]
    assert term.parameters[1].location == span_of(source, "bb")
    assert term.location == Span(0, len(source))


def test_keywords_are_not_identifiers_but_prefixes_are() -> None:
    term = parse_source("let iffy = 1; let fnord = 2; iffy + fnord")

    assert isinstance(term, Let) and term.name.text == "iffy"


def test_spans_are_byte_offsets() -> None:
    source = 'let s = "ção"; s + x'
    term = parse_source(source)

    assert isinstance(term, Let)
    assert term.value.location == span_of(source, '"ção"')
    assert term.next.location == span_of(source, "s + x")
    assert term.next.location.start == len('let s = "ção"; '.encode("utf-8"))


def test_spans_carry_filename() -> None:
    file = parse_file("1", "prog.rinha")

    assert file.name == "prog.rinha"
    assert file.expression.location.filename == "prog.rinha"


def test_comments_are_ignored() -> None:
    source = "// leading\nlet x = /* inline */ 1;\n/* block\n over lines */ x // trailing"
    term = parse_source(source)

    assert isinstance(term, Let)
    assert isinstance(term.value, Int) and term.value.value == 1
    assert term.value.location == span_of(source, "1")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"plain"', "plain"),
        (r'"a\nb"', "a\nb"),
        (r'"q\"q"', 'q"q'),
        (r'"back\\slash"', "back\\slash"),
        (r'"\x"', "x"),
    ],
)
def test_decode_string(raw: str, expected: str) -> None:
    assert decode_string(raw) == expected


@pytest.mark.parametrize(
    "source, line, column",
    [
        pytest.param("let x = 1", 1, 10, id="missing-semicolon-and-body"),
        pytest.param("1 +", 1, 4, id="dangling-operator"),
        pytest.param("let x = 1;\nx $ 2", 2, 3, id="bad-character"),
        pytest.param("fn (x) => x", 1, 11, id="body-needs-braces"),
        pytest.param("if (true) { 1 }", 1, 16, id="if-needs-else"),
        pytest.param("(1, 2, 3)", 1, 6, id="tuples-are-pairs"),
    ],
)
def test_syntax_errors_report_position(source: str, line: int, column: int) -> None:
    with pytest.raises(RinhaSyntaxError) as exc_info:
        parse_source(source)

    err = exc_info.value
    assert (err.line, err.column) == (line, column)
    assert f"line {line}, col {column}" in str(err)


def test_depth_limit() -> None:
    source = "(" * 50 + "1" + ")" * 50
    assert isinstance(parse_source(source, max_depth=60), Int)

    nested = "let x = 1; " * 30 + "x"
    with pytest.raises(RinhaSyntaxError, match="nested too deeply"):
        parse_source(nested, max_depth=10)


def test_exhausted_stack_in_a_rule_is_a_syntax_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def overflow(self, *_args):
        raise RecursionError

    monkeypatch.setattr(ToTerms, "let", overflow)

    with pytest.raises(RinhaSyntaxError, match="nested too deeply"):
        parse_source("let x = 1; x")
