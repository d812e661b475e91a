"""Load programs serialized as the rinha JSON AST.

Shape: ``{"name": ..., "expression": <term>, "location": ...}`` where each
term is an object tagged by ``"kind"`` and carries
``"location": {"start", "end", "filename"}``.

Each object is validated by a pydantic wire model one node at a time; child
terms stay raw dicts until their parent converts them, so validation never
recurses deeper than a single node.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, TypeAdapter, ValidationError, field_validator, model_validator

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
from .types import I32_MAX, I32_MIN, RinhaLoadError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 2000

RawTerm = Dict[str, Any]

# --- wire models ---

class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: StrictInt = Field(ge=0)
    end: StrictInt = Field(ge=0)
    filename: Optional[StrictStr] = None

    @model_validator(mode='after')
    def check_order(self) -> 'Location':
        if self.start > self.end:
            raise ValueError(f"invalid span {self.start}..{self.end}")
        return self

    def to_span(self) -> Span:
        return Span(self.start, self.end, self.filename)


class NameModel(BaseModel):
    text: StrictStr
    location: Location

    def to_name(self) -> Name:
        return Name(self.text, self.location.to_span())


class _Node(BaseModel):
    location: Location


class IntNode(_Node):
    kind: Literal["Int"]
    value: StrictInt = Field(ge=I32_MIN, le=I32_MAX)

    def to_term(self) -> Term:
        return Int(self.value, self.location.to_span())


class StrNode(_Node):
    kind: Literal["Str"]
    value: StrictStr

    def to_term(self) -> Term:
        return Str(self.value, self.location.to_span())


class BoolNode(_Node):
    kind: Literal["Bool"]
    value: StrictBool

    def to_term(self) -> Term:
        return Bool(self.value, self.location.to_span())


class PrintNode(_Node):
    kind: Literal["Print"]
    value: RawTerm

    def to_term(self) -> Term:
        return Print(term_from_json(self.value), self.location.to_span())


class BinaryNode(_Node):
    kind: Literal["Binary"]
    lhs: RawTerm
    op: BinaryOp
    rhs: RawTerm

    @field_validator('op', mode='before')
    @classmethod
    def parse_tag(cls, value: Any) -> BinaryOp:
        if not isinstance(value, str):
            raise ValueError("operator must be a string")
        return BinaryOp.from_tag(value)

    def to_term(self) -> Term:
        return Binary(term_from_json(self.lhs), self.op, term_from_json(self.rhs), self.location.to_span())


class IfNode(_Node):
    kind: Literal["If"]
    condition: RawTerm
    then: RawTerm
    otherwise: RawTerm

    def to_term(self) -> Term:
        return If(
            term_from_json(self.condition),
            term_from_json(self.then),
            term_from_json(self.otherwise),
            self.location.to_span(),
        )


class LetNode(_Node):
    kind: Literal["Let"]
    name: NameModel
    value: RawTerm
    next: RawTerm

    def to_term(self) -> Term:
        return Let(self.name.to_name(), term_from_json(self.value), term_from_json(self.next), self.location.to_span())


class VarNode(_Node):
    kind: Literal["Var"]
    text: StrictStr

    def to_term(self) -> Term:
        return Var(self.text, self.location.to_span())


class FunctionNode(_Node):
    kind: Literal["Function"]
    parameters: List[NameModel]
    value: RawTerm

    def to_term(self) -> Term:
        params = tuple(p.to_name() for p in self.parameters)
        return Function(params, term_from_json(self.value), self.location.to_span())


class CallNode(_Node):
    kind: Literal["Call"]
    callee: RawTerm
    arguments: List[RawTerm]

    def to_term(self) -> Term:
        args = tuple(term_from_json(a) for a in self.arguments)
        return Call(term_from_json(self.callee), args, self.location.to_span())


class TupleNode(_Node):
    kind: Literal["Tuple"]
    first: RawTerm
    second: RawTerm

    def to_term(self) -> Term:
        return Tuple(term_from_json(self.first), term_from_json(self.second), self.location.to_span())


class FirstNode(_Node):
    kind: Literal["First"]
    value: RawTerm

    def to_term(self) -> Term:
        return First(term_from_json(self.value), self.location.to_span())


class SecondNode(_Node):
    kind: Literal["Second"]
    value: RawTerm

    def to_term(self) -> Term:
        return Second(term_from_json(self.value), self.location.to_span())


TermNode = Annotated[
    Union[
        IntNode, StrNode, BoolNode, PrintNode, BinaryNode, IfNode, LetNode,
        VarNode, FunctionNode, CallNode, TupleNode, FirstNode, SecondNode,
    ],
    Field(discriminator="kind"),
]

_TERM_ADAPTER: TypeAdapter[Any] = TypeAdapter(TermNode)


class FileModel(BaseModel):
    name: StrictStr
    expression: RawTerm
    location: Optional[Location] = None

# --- loading ---

def load_file(text: str, max_depth: int=DEFAULT_MAX_DEPTH) -> File:
    try:
        data = json.loads(text)
    except RecursionError:
        raise RinhaLoadError("program nested too deeply") from None
    except ValueError as exc:
        raise RinhaLoadError(f"invalid JSON: {exc}") from exc

    return file_from_json(data, max_depth=max_depth)


def load_path(path: str | Path, max_depth: int=DEFAULT_MAX_DEPTH) -> File:
    p = Path(path)

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise RinhaLoadError(f"cannot read {p}: {exc.strerror}") from exc

    return load_file(text, max_depth=max_depth)


def file_from_json(data: Any, max_depth: int=DEFAULT_MAX_DEPTH) -> File:
    try:
        model = FileModel.model_validate(data)
    except ValidationError as exc:
        raise RinhaLoadError(_describe(exc, "file")) from None

    try:
        expression = term_from_json(model.expression)
    except RecursionError:
        raise RinhaLoadError("program nested too deeply") from None

    depth = term_depth(expression)
    if depth > max_depth:
        raise RinhaLoadError(f"program nested too deeply ({depth} > {max_depth})")

    logger.debug("loaded %s (depth %d)", model.name, depth)
    return File(name=model.name, expression=expression)


def term_from_json(data: Any) -> Term:
    try:
        node = _TERM_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise RinhaLoadError(_describe(exc, "term")) from None

    return node.to_term()


def _describe(exc: ValidationError, context: str) -> str:
    """First validation problem as `context.path: message`."""
    err = exc.errors()[0]
    path = ".".join(str(part) for part in (context, *err["loc"]))
    return f"{path}: {err['msg']}"
