from __future__ import annotations

from typing import Callable

from ..runtime import Environment, RinInt, RinValue
from ..tree import Term

EvalFunc = Callable[[Term, Environment], RinValue]

def is_int_pair(lhs: RinValue, rhs: RinValue) -> bool:
    return isinstance(lhs, RinInt) and isinstance(rhs, RinInt)

def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def trunc_rem(a: int, b: int) -> int:
    return a - b * trunc_div(a, b)
