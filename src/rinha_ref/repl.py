"""Interactive rinha session on prompt_toolkit.

Each entry is evaluated in one long-lived environment, so `let x = 1; x`
leaves `x` bound for later entries. Lines starting with `:` are session
commands rather than rinha source.
"""

from __future__ import annotations

import os
import sys
import traceback
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, TextIO

from lark.exceptions import LarkError
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings

from .config import DEBUG_PY_TRACE_ENV, RunConfig, debug_py_trace_enabled, raise_recursion_limit, setup_logging
from .diagnostics import render
from .parser import make_parser
from .repl_highlight import RinhaLexer
from .runner import repl_eval
from .runtime import Environment, RinValue, RinhaError

_OPENERS = {"LPAR": "RPAR", "LBRACE": "RBRACE"}


def new_session_env(out: Optional[TextIO]=None) -> Environment:
    return Environment(out=out or sys.stdout, print_end="\n")


def is_incomplete(text: str) -> bool:
    """Return True while *text* still has unclosed parentheses or braces."""
    depth = 0

    try:
        for tok in make_parser().lex(text):
            if tok.type in _OPENERS:
                depth += 1
            elif tok.type in _OPENERS.values():
                depth -= 1
    except LarkError:
        return False

    return depth > 0


@dataclass
class Session:
    out: TextIO = field(default_factory=lambda: sys.stdout)
    env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.env = new_session_env(self.out)

    def evaluate(self, text: str) -> RinValue:
        return repl_eval(text, self.env)

    def command(self, line: str) -> Optional[str]:
        """Run a `:command` and return its reply; None when *line* is source."""
        word = line.strip()
        if not word.startswith(":"):
            return None

        action = COMMANDS.get(word)
        if action is None:
            return f"unknown command {word} (known: {' '.join(COMMANDS)})"

        return action[0](self)

    def reset(self) -> str:
        self.env = new_session_env(self.out)
        return "bindings cleared"

    def names(self) -> str:
        bound = sorted(self.env.vars)
        return " ".join(bound) if bound else "no bindings"

    def toggle_trace(self) -> str:
        if debug_py_trace_enabled():
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            return "python tracebacks off"

        os.environ[DEBUG_PY_TRACE_ENV] = "1"
        return "python tracebacks on"


# command => (handler, help shown in the completion menu)
COMMANDS: Dict[str, tuple[Callable[[Session], str], str]] = {
    ":names": (Session.names, "list names bound in this session"),
    ":reset": (Session.reset, "drop every binding"),
    ":trace": (Session.toggle_trace, "toggle Python tracebacks on errors"),
}


def _report(exc: RinhaError, text: str) -> None:
    print(render(exc, text, "<repl>"), file=sys.stderr)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")


def repl() -> None:
    setup_logging()
    raise_recursion_limit(RunConfig())
    session = Session()

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        if is_incomplete(buf.text):
            buf.insert_text("\n    ")
            return

        buf.validate_and_handle()

    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=RinhaLexer(),
        completer=WordCompleter(list(COMMANDS), meta_dict={k: v[1] for k, v in COMMANDS.items()}, sentence=True),
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("rinha repl (Ctrl-D to exit, :names :reset :trace)")

    while True:
        try:
            text = prompt.prompt("rinha> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            continue

        if not text.strip():
            continue

        reply = session.command(text)
        if reply is not None:
            print(reply)
            continue

        try:
            result = session.evaluate(text)
        except RinhaError as exc:
            _report(exc, text)
            continue
        except RecursionError:
            print("error: stack overflow", file=sys.stderr)
            continue

        print(repr(result))


def main() -> None:
    repl()


if __name__ == "__main__":
    main()
