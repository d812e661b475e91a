from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .config import RunConfig, debug_py_trace_enabled, raise_recursion_limit, setup_logging
from .diagnostics import render
from .evaluator import eval_expr
from .loader import load_file
from .parser import parse_file, parse_source
from .runtime import Environment, RinValue, RinhaError, RinhaLoadError, RinhaRuntimeError
from .tree import File

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_MALFORMED = 2

STDIN_NAME = "<stdin>"

def run(src: str, filename: str="<input>", out: Optional[TextIO]=None, config: RunConfig=RunConfig()) -> RinValue:
    """Parse and evaluate rinha source text."""
    term = parse_source(src, filename=filename, max_depth=config.max_depth)
    return eval_expr(term, out=out, print_end=config.print_end)

def run_file(file: File, out: Optional[TextIO]=None, config: RunConfig=RunConfig()) -> RinValue:
    logger.debug("running %s", file.name)
    return eval_expr(file.expression, out=out, print_end=config.print_end)

def repl_eval(src: str, env: Environment) -> RinValue:
    """Evaluate one REPL entry in a long-lived environment."""
    term = parse_source(src, filename="<repl>")
    return eval_expr(term, env)

def looks_like_json(text: str) -> bool:
    return text.lstrip().startswith("{")

def read_input(arg: Optional[str]) -> Tuple[str, str]:
    """
    Resolve a CLI argument into (name, text).
    - None or "-" => read stdin.
    - Otherwise the argument is a path.
    """
    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data.strip():
            raise RinhaLoadError("No input provided on stdin")
        return STDIN_NAME, data

    try:
        return arg, Path(arg).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RinhaLoadError(f"cannot read {arg}: {exc}") from exc

def load_program(name: str, data: str, force_json: bool=False, config: RunConfig=RunConfig()) -> Tuple[File, Optional[str]]:
    """Turn input text into a program plus, when known, its source text.

    JSON input (by flag, `.json` suffix, or a leading `{`) is a serialized
    AST; anything else is rinha source.
    """
    if force_json or name.endswith(".json") or looks_like_json(data):
        file = load_file(data, max_depth=config.max_depth)
        return file, _read_original_source(file.name, name)

    return parse_file(data, name, max_depth=config.max_depth), data

def _read_original_source(name: str, input_arg: Optional[str]) -> Optional[str]:
    """Re-read the source a JSON AST was produced from, if it is around."""
    candidates = [Path(name)]
    if input_arg not in (None, "-", STDIN_NAME):
        candidates.append(Path(input_arg).resolve().parent / name)

    for cand in candidates:
        try:
            if cand.is_file():
                return cand.read_text(encoding="utf-8")
        except OSError:
            continue

    return None

def report(err: RinhaError, name: str, source: Optional[str], stream: TextIO) -> None:
    print(render(err, source, name), file=stream)

    if debug_py_trace_enabled() and err.__traceback__ is not None:
        print("\nPython traceback:", file=stream)
        print("".join(traceback.format_tb(err.__traceback__)), file=stream, end="")

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rinha", description="Evaluate a rinha program (source or JSON AST).")
    ap.add_argument("program", nargs="?", default="-", help="path to a .rinha or .json file; '-' or nothing reads stdin")
    ap.add_argument("--json", action="store_true", help="treat the input as a JSON AST regardless of its name")
    ap.add_argument("--newline", action="store_true", help="end every print with a newline")
    ap.add_argument("--max-depth", type=int, default=RunConfig.max_depth, help="reject programs nested deeper than this")
    ap.add_argument("--recursion-limit", type=int, default=RunConfig.recursion_limit, help="Python recursion limit while evaluating")
    ap.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return ap

def main(argv: Optional[List[str]]=None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    config = RunConfig(
        print_end="\n" if args.newline else "",
        recursion_limit=args.recursion_limit,
        max_depth=args.max_depth,
    )

    raise_recursion_limit(config)

    name = STDIN_NAME if args.program in (None, "-") else args.program
    data: Optional[str] = None

    try:
        name, data = read_input(args.program)
        file, source = load_program(name, data, force_json=args.json, config=config)
    except RinhaLoadError as exc:
        report(exc, name, data, sys.stderr)
        return EXIT_MALFORMED

    try:
        run_file(file, out=sys.stdout, config=config)
    except RinhaRuntimeError as exc:
        sys.stdout.flush()
        report(exc, file.name, source, sys.stderr)
        return EXIT_RUNTIME_ERROR
    except RecursionError:
        sys.stdout.flush()
        print("error: stack overflow", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    sys.stdout.flush()
    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
