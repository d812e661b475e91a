"""Term model for parsed rinha programs.

Every node carries a `Span` of byte offsets into the original source so the
evaluator can point diagnostics back at the text that produced them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional
from typing_extensions import TypeAlias


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    filename: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class Name:
    """Identifier token: the bound name of a `let` or a function parameter."""
    text: str
    location: Span


class BinaryOp(Enum):
    ADD = ("Add", "+")
    SUB = ("Sub", "-")
    MUL = ("Mul", "*")
    DIV = ("Div", "/")
    REM = ("Rem", "%")
    EQ = ("Eq", "==")
    NEQ = ("Neq", "!=")
    LT = ("Lt", "<")
    GT = ("Gt", ">")
    LTE = ("Lte", "<=")
    GTE = ("Gte", ">=")
    AND = ("And", "&&")
    OR = ("Or", "||")

    def __init__(self, tag: str, symbol: str) -> None:
        self.tag = tag
        self.symbol = symbol

    @classmethod
    def from_tag(cls, tag: str) -> BinaryOp:
        for op in cls:
            if op.tag == tag:
                return op

        raise ValueError(f"unknown binary operator {tag!r}")

    @classmethod
    def from_symbol(cls, symbol: str) -> BinaryOp:
        for op in cls:
            if op.symbol == symbol:
                return op

        raise ValueError(f"unknown binary operator {symbol!r}")


# ---------- Terms ----------

@dataclass(frozen=True)
class Int:
    value: int
    location: Span

@dataclass(frozen=True)
class Str:
    value: str
    location: Span

@dataclass(frozen=True)
class Bool:
    value: bool
    location: Span

@dataclass(frozen=True)
class Print:
    value: 'Term'
    location: Span

@dataclass(frozen=True)
class Binary:
    lhs: 'Term'
    op: BinaryOp
    rhs: 'Term'
    location: Span

@dataclass(frozen=True)
class If:
    condition: 'Term'
    then: 'Term'
    otherwise: 'Term'
    location: Span

@dataclass(frozen=True)
class Let:
    name: Name
    value: 'Term'
    next: 'Term'
    location: Span

@dataclass(frozen=True)
class Var:
    text: str
    location: Span

@dataclass(frozen=True)
class Function:
    parameters: tuple[Name, ...]
    value: 'Term'
    location: Span

    def parameters_span(self) -> Span:
        """Span covering the declared parameters, or the `fn` keyword when there are none."""
        if not self.parameters:
            start = self.location.start
            return Span(start, start + 2, self.location.filename)

        first, last = self.parameters[0], self.parameters[-1]
        return Span(first.location.start, last.location.end, self.location.filename)

@dataclass(frozen=True)
class Call:
    callee: 'Term'
    arguments: tuple['Term', ...]
    location: Span

@dataclass(frozen=True)
class Tuple:
    first: 'Term'
    second: 'Term'
    location: Span

@dataclass(frozen=True)
class First:
    value: 'Term'
    location: Span

@dataclass(frozen=True)
class Second:
    value: 'Term'
    location: Span


Term: TypeAlias = (
    Int
    | Str
    | Bool
    | Print
    | Binary
    | If
    | Let
    | Var
    | Function
    | Call
    | Tuple
    | First
    | Second
)

TERM_TYPES: tuple[type, ...] = (
    Int, Str, Bool, Print, Binary, If, Let, Var, Function, Call, Tuple, First, Second,
)


@dataclass(frozen=True)
class File:
    """A loaded program: the name it was read from plus its root term."""
    name: str
    expression: Term


def is_term(node: object) -> bool:
    return isinstance(node, TERM_TYPES)

def term_children(node: Term) -> List[Term]:
    match node:
        case Print(value=v) | First(value=v) | Second(value=v):
            return [v]
        case Binary(lhs=lhs, rhs=rhs):
            return [lhs, rhs]
        case If(condition=c, then=t, otherwise=o):
            return [c, t, o]
        case Let(value=v, next=n):
            return [v, n]
        case Function(value=body):
            return [body]
        case Call(callee=callee, arguments=args):
            return [callee, *args]
        case Tuple(first=a, second=b):
            return [a, b]
        case _:
            return []

def walk(node: Term) -> Iterator[Term]:
    """Pre-order traversal without recursion."""
    stack: List[Term] = [node]

    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(term_children(cur)))

def term_depth(node: Term) -> int:
    depth = 0
    stack: List[tuple[Term, int]] = [(node, 1)]

    while stack:
        cur, level = stack.pop()
        depth = max(depth, level)

        for child in term_children(cur):
            stack.append((child, level + 1))

    return depth
