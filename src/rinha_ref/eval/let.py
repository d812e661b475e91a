from __future__ import annotations

from ..runtime import Environment, RinValue, RinhaUnknownIdentifier
from ..tree import Let, Var
from .common import EvalFunc

def eval_let(n: Let, env: Environment, eval_func: EvalFunc) -> RinValue:
    """Bind into the current frame, then continue in that same environment.

    A rebinding of an existing name shadows it for the rest of `next`.
    """
    value = eval_func(n.value, env)
    env.set(n.name.text, value)

    return eval_func(n.next, env)

def eval_var(n: Var, env: Environment) -> RinValue:
    value = env.get(n.text)
    if value is None:
        raise RinhaUnknownIdentifier(n)

    return value
