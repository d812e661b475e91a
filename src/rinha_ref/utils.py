from __future__ import annotations

from typing import Optional

from .types import (
    RinValue,
    RinBool,
    RinClosure,
    RinInt,
    RinStr,
    RinTuple,
)


def rin_equals(lhs: RinValue, rhs: RinValue) -> bool:
    match (lhs, rhs):
        case (RinInt(value=a), RinInt(value=b)):
            return a == b
        case (RinStr(value=a), RinStr(value=b)):
            return a == b
        case (RinBool(value=a), RinBool(value=b)):
            return a == b
        case (RinTuple(first=a1, second=a2), RinTuple(first=b1, second=b2)):
            return rin_equals(a1, b1) and rin_equals(a2, b2)
        # closures have no identity worth comparing, not even against themselves
        case _:
            return False


def type_name(value: Optional[RinValue]) -> str:
    match value:
        case RinInt():
            return "Int"
        case RinStr():
            return "Str"
        case RinBool():
            return "Bool"
        case RinTuple():
            return "Tuple"
        case RinClosure():
            return "Closure"
        case _:
            return type(value).__name__


def stringify(value: RinValue) -> str:
    if isinstance(value, RinStr):
        return value.value

    if isinstance(value, RinInt):
        return str(value.value)

    if isinstance(value, RinBool):
        return "true" if value.value else "false"

    if isinstance(value, RinTuple):
        return f"({stringify(value.first)}, {stringify(value.second)})"

    return repr(value)
