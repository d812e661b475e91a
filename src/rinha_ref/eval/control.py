from __future__ import annotations

from ..runtime import Environment, RinBool, RinValue, RinhaArgumentError
from ..tree import If
from ..utils import type_name
from .common import EvalFunc

def eval_if(n: If, env: Environment, eval_func: EvalFunc) -> RinValue:
    cond_val = eval_func(n.condition, env)

    if not isinstance(cond_val, RinBool):
        raise RinhaArgumentError(f"if condition must be a Bool, got {type_name(cond_val)}", n.condition.location)

    if cond_val.value:
        return eval_func(n.then, env)

    return eval_func(n.otherwise, env)
