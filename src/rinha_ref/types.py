from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Dict, Optional, TextIO
from typing_extensions import TypeAlias, TypeGuard

from .tree import Call, Function, Span, Var

I32_MIN = -(2 ** 31)
I32_MAX = 2 ** 31 - 1

# ---------- Value Model ----------

@dataclass(frozen=True)
class RinInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class RinStr:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class RinBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class RinTuple:
    first: 'RinValue'
    second: 'RinValue'
    def __repr__(self) -> str:
        return f"({self.first!r}, {self.second!r})"

@dataclass(eq=False)
class RinClosure:
    function: Function          # unevaluated literal
    env: 'Environment'          # captured scope
    def __repr__(self) -> str:
        return "<#closure>"

RinValue: TypeAlias = RinInt | RinStr | RinBool | RinTuple | RinClosure

_RIN_VALUE_TYPES: tuple[type, ...] = (RinInt, RinStr, RinBool, RinTuple, RinClosure)

def is_rin_value(value: object) -> TypeGuard[RinValue]:
    return isinstance(value, _RIN_VALUE_TYPES)

def wrap_i32(value: int) -> int:
    """Reduce an integer to the signed 32-bit range, two's complement style."""
    return (value - I32_MIN) % (2 ** 32) + I32_MIN

# ---------- Environment ----------

class Environment:
    """Chain of binding frames.

    `vars` is the current frame. A snapshot gets a fresh, empty frame whose
    parent is this environment itself, so bindings added here later are still
    visible through the snapshot. That is how `let f = fn ...` can call `f`
    from inside its own body.
    """

    def __init__(self, parent: Optional['Environment']=None, out: Optional[TextIO]=None, print_end: Optional[str]=None):
        self.parent = parent
        self.vars: Dict[str, RinValue] = {}
        self.out: TextIO
        self.print_end: str

        if out is not None:
            self.out = out
        elif parent is not None:
            self.out = parent.out
        else:
            self.out = sys.stdout

        if print_end is not None:
            self.print_end = print_end
        elif parent is not None:
            self.print_end = parent.print_end
        else:
            self.print_end = ""

    def get(self, name: str) -> Optional[RinValue]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                return env.vars[name]

            env = env.parent

        return None

    def set(self, name: str, val: RinValue) -> None:
        self.vars[name] = val

    def snapshot(self) -> 'Environment':
        return Environment(parent=self)

    def depth(self) -> int:
        n = 0
        env = self.parent

        while env is not None:
            n += 1
            env = env.parent

        return n

    def write(self, text: str) -> None:
        self.out.write(text + self.print_end)

    def __repr__(self) -> str:
        return f"<Environment names={sorted(self.vars)} depth={self.depth()}>"

# ---------- Exceptions ----------

class RinhaError(Exception):
    """Base class for everything the interpreter reports to a user."""

class RinhaLoadError(RinhaError):
    """The program could not be turned into a term tree (malformed input)."""

class RinhaSyntaxError(RinhaLoadError):
    def __init__(self, message: str, location: Span, line: int, column: int):
        super().__init__(message)
        self.message = message
        self.location = location
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, col {self.column})"

class RinhaRuntimeError(RinhaError):
    kind = "argument-error"

    def __init__(self, message: str, location: Span):
        super().__init__(message)
        self.message = message
        self.location = location

class RinhaArgumentError(RinhaRuntimeError):
    pass

class RinhaUnknownIdentifier(RinhaRuntimeError):
    kind = "unknown-identifier"

    def __init__(self, var: Var):
        super().__init__(f"unknown identifier '{var.text}'", var.location)
        self.var = var

class RinhaInvalidBinaryOperation(RinhaRuntimeError):
    kind = "invalid-binary-operation"

    def __init__(self, location: Span, detail: Optional[str]=None):
        message = "invalid binary operation"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, location)

class RinhaDivisionByZero(RinhaRuntimeError):
    kind = "division-by-zero"

    def __init__(self, location: Span):
        super().__init__("division by zero", location)

class RinhaArityError(RinhaRuntimeError):
    kind = "invalid-number-of-arguments"

    def __init__(self, function: Function, call: Call):
        expected = len(function.parameters)
        got = len(call.arguments)
        super().__init__(f"invalid number of arguments: expected {expected}, got {got}", call.location)
        self.function = function
        self.call = call
