"""Run configuration and logging setup shared by the CLI and the REPL."""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from .loader import DEFAULT_MAX_DEPTH

DEBUG_PY_TRACE_ENV = "RINHA_DEBUG_PY_TRACE"
# Python frames spent per level of term nesting by the JSON loader and the
# lark Transformer
FRAMES_PER_LEVEL = 10
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class RunConfig:
    print_end: str = ""
    recursion_limit: int = 20_000
    max_depth: int = DEFAULT_MAX_DEPTH

    def python_recursion_limit(self) -> int:
        """Stack needed to load, parse and evaluate programs up to `max_depth`."""
        return max(self.recursion_limit, self.max_depth * FRAMES_PER_LEVEL)


def raise_recursion_limit(config: RunConfig) -> None:
    # never lowers a limit someone else already raised
    sys.setrecursionlimit(max(sys.getrecursionlimit(), config.python_recursion_limit()))


def debug_py_trace_enabled() -> bool:
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in ("1", "true", "yes", "on")


def setup_logging(level: str = "WARNING") -> None:
    """
    Configure logging for the interpreter.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Logs go to stderr; stdout belongs to the program's `print` output.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("rinha_ref").setLevel(numeric_level)
    logging.getLogger(__name__).debug("Logging initialized at %s level", level.upper())
