from __future__ import annotations

from ..runtime import Environment, RinClosure, RinValue, RinhaArgumentError, call_closure
from ..tree import Call, Function
from ..utils import type_name
from .common import EvalFunc

def eval_function(n: Function, env: Environment) -> RinClosure:
    # capture only; the body runs on call
    return RinClosure(function=n, env=env.snapshot())

def eval_call(n: Call, env: Environment, eval_func: EvalFunc) -> RinValue:
    callee = eval_func(n.callee, env)

    if not isinstance(callee, RinClosure):
        raise RinhaArgumentError(f"not a function: {type_name(callee)}", n.location)

    return call_closure(callee, n, env)
