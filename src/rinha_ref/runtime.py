from __future__ import annotations

import logging
from typing import List

from .tree import Call
from .types import (
    RinInt, RinStr, RinBool, RinTuple, RinClosure,
    RinValue, Environment,
    RinhaError, RinhaLoadError, RinhaSyntaxError,
    RinhaRuntimeError, RinhaArgumentError, RinhaUnknownIdentifier,
    RinhaInvalidBinaryOperation, RinhaDivisionByZero, RinhaArityError,
    I32_MIN, I32_MAX,
    is_rin_value, wrap_i32,
)

logger = logging.getLogger(__name__)

def call_closure(fn: RinClosure, call: Call, caller_env: Environment) -> RinValue:
    """
    Call semantics:
    - arity is checked before any argument is evaluated, so a mismatch never
      leaves a parameter half bound
    - arguments are evaluated left to right in the caller's environment
    - each invocation binds its parameters in a fresh child of the captured
      environment; the captured frame itself is never written to
    """
    from .evaluator import eval_node  # local import to avoid cycle

    function = fn.function

    if len(call.arguments) != len(function.parameters):
        raise RinhaArityError(function, call)

    args: List[RinValue] = [eval_node(arg, caller_env) for arg in call.arguments]
    callee_env = fn.env.snapshot()

    for param, val in zip(function.parameters, args):
        callee_env.set(param.text, val)

    logger.debug("call at %r with %d arg(s)", call.location, len(args))

    return eval_node(function.value, callee_env)
