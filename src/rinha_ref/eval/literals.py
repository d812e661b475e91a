from __future__ import annotations

from ..runtime import (
    Environment,
    RinBool,
    RinInt,
    RinStr,
    RinTuple,
    RinValue,
    RinhaArgumentError,
)
from ..tree import Bool, First, Int, Print, Second, Str, Tuple
from ..utils import stringify, type_name
from .common import EvalFunc

def eval_int(n: Int, _env: Environment) -> RinInt:
    return RinInt(n.value)

def eval_str(n: Str, _env: Environment) -> RinStr:
    return RinStr(n.value)

def eval_bool(n: Bool, _env: Environment) -> RinBool:
    return RinBool(n.value)

def eval_print(n: Print, env: Environment, eval_func: EvalFunc) -> RinValue:
    value = eval_func(n.value, env)
    env.write(stringify(value))

    return value

def eval_tuple(n: Tuple, env: Environment, eval_func: EvalFunc) -> RinTuple:
    first = eval_func(n.first, env)
    second = eval_func(n.second, env)

    return RinTuple(first, second)

def eval_projection(n: First | Second, env: Environment, eval_func: EvalFunc) -> RinValue:
    value = eval_func(n.value, env)

    if not isinstance(value, RinTuple):
        label = "first" if isinstance(n, First) else "second"
        # point at the operand, not at the projection
        raise RinhaArgumentError(f"{label}: not a tuple (got {type_name(value)})", n.value.location)

    return value.first if isinstance(n, First) else value.second
