"""Parse rinha source text into the Term model with lark.

Spans are converted from lark's character positions to byte offsets so they
line up with spans produced by other rinha front ends.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.exceptions import VisitError
from lark.visitors import v_args

from .loader import DEFAULT_MAX_DEPTH
from .tree import (
    Binary,
    BinaryOp,
    Bool,
    Call,
    File,
    First,
    Function,
    If,
    Int,
    Let,
    Name,
    Print,
    Second,
    Span,
    Str,
    Term,
    Tuple,
    Var,
    term_depth,
)
from .types import I32_MAX, RinhaSyntaxError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).resolve().with_name("rinha.lark")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", '"': '"', "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    path = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    grammar = path.read_text(encoding="utf-8")

    return Lark(
        grammar,
        parser="lalr",
        lexer="contextual",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
    )


class ByteOffsets:
    """Map character positions in `src` to UTF-8 byte offsets."""

    def __init__(self, src: str):
        self.length = len(src)
        self._table: Optional[List[int]] = None

        if not src.isascii():
            table = [0]
            total = 0

            for ch in src:
                total += len(ch.encode("utf-8"))
                table.append(total)
            self._table = table

    def __call__(self, pos: int) -> int:
        pos = max(0, min(pos, self.length))
        if self._table is None:
            return pos

        return self._table[pos]


def decode_string(raw: str) -> str:
    body = raw[1:-1]
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


@v_args(meta=True)
class ToTerms(Transformer):
    """Build Term objects from the parse tree, one method per tree label."""

    def __init__(self, offsets: ByteOffsets, filename: Optional[str]=None):
        super().__init__()
        self.offsets = offsets
        self.filename = filename

    def _span(self, meta: Any) -> Span:
        return Span(self.offsets(meta.start_pos), self.offsets(meta.end_pos), self.filename)

    def _token_span(self, tok: Token) -> Span:
        return Span(self.offsets(tok.start_pos), self.offsets(tok.end_pos), self.filename)

    def _name(self, tok: Token) -> Name:
        return Name(str(tok), self._token_span(tok))

    def int_lit(self, meta, children) -> Int:
        tok = children[0]
        value = int(tok)

        if value > I32_MAX:
            line, col = tok.line, tok.column
            raise RinhaSyntaxError(f"integer literal {tok} does not fit in 32 bits", self._token_span(tok), line, col)

        return Int(value, self._span(meta))

    def str_lit(self, meta, children) -> Str:
        return Str(decode_string(str(children[0])), self._span(meta))

    def true_lit(self, meta, _children) -> Bool:
        return Bool(True, self._span(meta))

    def false_lit(self, meta, _children) -> Bool:
        return Bool(False, self._span(meta))

    def var(self, meta, children) -> Var:
        return Var(str(children[0]), self._span(meta))

    def tuple(self, meta, children) -> Tuple:
        first, second = children
        return Tuple(first, second, self._span(meta))

    def params(self, _meta, children) -> List[Name]:
        return [self._name(tok) for tok in children]

    def args(self, _meta, children) -> List[Term]:
        return list(children)

    def function(self, meta, children) -> Function:
        if len(children) == 2:
            params, body = children
        else:
            params, body = [], children[0]

        return Function(tuple(params), body, self._span(meta))

    def call(self, meta, children) -> Call:
        callee = children[0]
        args = children[1] if len(children) > 1 else []

        return Call(callee, tuple(args), self._span(meta))

    def if_(self, meta, children) -> If:
        cond, then, otherwise = children
        return If(cond, then, otherwise, self._span(meta))

    def print(self, meta, children) -> Print:
        return Print(children[0], self._span(meta))

    def first(self, meta, children) -> First:
        return First(children[0], self._span(meta))

    def second(self, meta, children) -> Second:
        return Second(children[0], self._span(meta))

    def binary(self, meta, children) -> Binary:
        lhs, op_tok, rhs = children
        return Binary(lhs, BinaryOp.from_symbol(str(op_tok)), rhs, self._span(meta))

    def let(self, meta, children) -> Let:
        name_tok, value, nxt = children
        return Let(self._name(name_tok), value, nxt, self._span(meta))


def parse_source(src: str, filename: Optional[str]=None, max_depth: int=DEFAULT_MAX_DEPTH) -> Term:
    offsets = ByteOffsets(src)
    parser = make_parser()

    try:
        tree = parser.parse(src)
    except UnexpectedInput as exc:
        raise _syntax_error(exc, src, offsets, filename) from None

    try:
        term = ToTerms(offsets, filename).transform(tree)
    except VisitError as exc:
        # lark wraps whatever a rule callback raised
        if isinstance(exc.orig_exc, RinhaSyntaxError):
            raise exc.orig_exc from None
        if isinstance(exc.orig_exc, RecursionError):
            raise _too_deep(src, offsets, filename) from None
        raise
    except RecursionError:
        raise _too_deep(src, offsets, filename) from None

    depth = term_depth(term)
    if depth > max_depth:
        raise RinhaSyntaxError(f"program nested too deeply ({depth} > {max_depth})", term.location, 1, 1)

    logger.debug("parsed %s: depth %d", filename or "<input>", depth)
    return term


def _too_deep(src: str, offsets: ByteOffsets, filename: Optional[str]) -> RinhaSyntaxError:
    return RinhaSyntaxError("program nested too deeply", Span(0, offsets(len(src)), filename), 1, 1)


def parse_file(src: str, name: str, max_depth: int=DEFAULT_MAX_DEPTH) -> File:
    return File(name=name, expression=parse_source(src, filename=name, max_depth=max_depth))


def _syntax_error(exc: UnexpectedInput, src: str, offsets: ByteOffsets, filename: Optional[str]) -> RinhaSyntaxError:
    match exc:
        case UnexpectedEOF():
            message = "unexpected end of input"
            pos = len(src)
        case UnexpectedCharacters():
            message = f"unexpected character {src[exc.pos_in_stream]!r}"
            pos = exc.pos_in_stream
        case UnexpectedToken(token=tok) if tok.type == "$END":
            message = "unexpected end of input"
            pos = len(src)
        case UnexpectedToken(token=tok):
            message = f"unexpected token {str(tok)!r}"
            pos = exc.pos_in_stream if exc.pos_in_stream is not None else len(src)
        case _:
            message = "syntax error"
            pos = getattr(exc, "pos_in_stream", None) or 0

    start = offsets(pos)
    end = offsets(min(pos + 1, len(src)))
    line = src.count("\n", 0, pos) + 1
    column = pos - (src.rfind("\n", 0, pos) + 1) + 1

    return RinhaSyntaxError(message, Span(start, max(start, end), filename), line, column)
