from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, TextIO

from .runtime import Environment, RinValue, RinhaRuntimeError
from .tree import (
    Binary,
    Bool,
    Call,
    First,
    Function,
    If,
    Int,
    Let,
    Print,
    Second,
    Str,
    Term,
    Tuple,
    Var,
)

from .eval.literals import eval_bool, eval_int, eval_print, eval_projection, eval_str, eval_tuple
from .eval.expr import eval_binary
from .eval.control import eval_if
from .eval.let import eval_let, eval_var
from .eval.fn import eval_call, eval_function

logger = logging.getLogger(__name__)

# ---------------- Public API ----------------

def eval_expr(ast: Term, env: Optional[Environment]=None, out: Optional[TextIO]=None, print_end: Optional[str]=None) -> RinValue:
    """Evaluate a whole program.

    A fresh root environment is made when none is given. Any failure raises a
    `RinhaRuntimeError` subclass carrying the span(s) to report; output already
    printed before the failure stays printed.
    """
    if env is None:
        env = Environment(out=out, print_end=print_end)

    logger.debug("evaluating %s at %r", type(ast).__name__, ast.location)

    return eval_node(ast, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Term, env: Environment) -> RinValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise RinhaRuntimeError(f"unknown node: {type(n).__name__}", n.location)

    return handler(n, env)

_NODE_DISPATCH: Dict[type, Callable[[Term, Environment], RinValue]] = {
    Int: eval_int,
    Str: eval_str,
    Bool: eval_bool,
    Var: eval_var,
    Function: eval_function,
    Print: lambda n, env: eval_print(n, env, eval_node),
    Tuple: lambda n, env: eval_tuple(n, env, eval_node),
    First: lambda n, env: eval_projection(n, env, eval_node),
    Second: lambda n, env: eval_projection(n, env, eval_node),
    Binary: lambda n, env: eval_binary(n, env, eval_node),
    If: lambda n, env: eval_if(n, env, eval_node),
    Let: lambda n, env: eval_let(n, env, eval_node),
    Call: lambda n, env: eval_call(n, env, eval_node),
}
