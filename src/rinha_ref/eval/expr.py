from __future__ import annotations

from ..runtime import (
    Environment,
    RinBool,
    RinInt,
    RinStr,
    RinValue,
    RinhaDivisionByZero,
    RinhaInvalidBinaryOperation,
    wrap_i32,
)
from ..tree import Binary, BinaryOp, Span
from ..utils import rin_equals, stringify, type_name
from .common import EvalFunc, is_int_pair, trunc_div, trunc_rem

_ARITH = {BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.REM}
_ORDER = {BinaryOp.LT, BinaryOp.GT, BinaryOp.LTE, BinaryOp.GTE}
_LOGIC = {BinaryOp.AND, BinaryOp.OR}

def eval_binary(n: Binary, env: Environment, eval_func: EvalFunc) -> RinValue:
    # both sides always run, `&&` and `||` included
    lhs = eval_func(n.lhs, env)
    rhs = eval_func(n.rhs, env)

    return apply_binary_operator(n.op, lhs, rhs, n.location)

def apply_binary_operator(op: BinaryOp, lhs: RinValue, rhs: RinValue, location: Span) -> RinValue:
    match op:
        case BinaryOp.ADD:
            if is_int_pair(lhs, rhs):
                return RinInt(wrap_i32(lhs.value + rhs.value))
            return RinStr(stringify(lhs) + stringify(rhs))
        case BinaryOp.DIV | BinaryOp.REM if isinstance(rhs, RinInt) and rhs.value == 0:
            raise RinhaDivisionByZero(location)
        case _ if op in _ARITH:
            if not is_int_pair(lhs, rhs):
                raise _invalid(op, lhs, rhs, location)
            return RinInt(wrap_i32(_arith(op, lhs.value, rhs.value)))
        case _ if op in _ORDER:
            if not is_int_pair(lhs, rhs):
                raise _invalid(op, lhs, rhs, location)
            return RinBool(_order(op, lhs.value, rhs.value))
        case _ if op in _LOGIC:
            if not (isinstance(lhs, RinBool) and isinstance(rhs, RinBool)):
                raise _invalid(op, lhs, rhs, location)
            if op is BinaryOp.AND:
                return RinBool(lhs.value and rhs.value)
            return RinBool(lhs.value or rhs.value)
        case BinaryOp.EQ | BinaryOp.NEQ:
            if not _comparable(lhs, rhs):
                raise _invalid(op, lhs, rhs, location)
            same = rin_equals(lhs, rhs)
            return RinBool(same if op is BinaryOp.EQ else not same)

    raise RinhaInvalidBinaryOperation(location, f"unknown operator {op.symbol}")

def _comparable(lhs: RinValue, rhs: RinValue) -> bool:
    return type(lhs) is type(rhs) and isinstance(lhs, (RinInt, RinBool, RinStr))

def _arith(op: BinaryOp, a: int, b: int) -> int:
    match op:
        case BinaryOp.SUB:
            return a - b
        case BinaryOp.MUL:
            return a * b
        case BinaryOp.DIV:
            return trunc_div(a, b)
        case BinaryOp.REM:
            return trunc_rem(a, b)

    raise ValueError(f"not an arithmetic operator: {op}")

def _order(op: BinaryOp, a: int, b: int) -> bool:
    match op:
        case BinaryOp.LT:
            return a < b
        case BinaryOp.GT:
            return a > b
        case BinaryOp.LTE:
            return a <= b
        case BinaryOp.GTE:
            return a >= b

    raise ValueError(f"not an ordering operator: {op}")

def _invalid(op: BinaryOp, lhs: RinValue, rhs: RinValue, location: Span) -> RinhaInvalidBinaryOperation:
    return RinhaInvalidBinaryOperation(location, f"{type_name(lhs)} {op.symbol} {type_name(rhs)}")
