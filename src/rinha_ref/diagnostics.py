"""Turn interpreter errors into labeled spans and source-annotated reports.

Kept apart from the evaluator: evaluation only raises errors carrying spans,
and this module decides how those spans are presented.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .tree import Span
from .types import (
    RinhaArityError,
    RinhaError,
    RinhaRuntimeError,
    RinhaSyntaxError,
    RinhaUnknownIdentifier,
)

LabeledSpan = Tuple[Span, str]


@dataclass(frozen=True)
class Position:
    line: int        # 1-based
    column: int      # 1-based, in characters
    line_start: int  # byte offset of the line's first byte
    line_end: int    # byte offset just past the line's last byte (newline excluded)


def labeled_spans(err: RinhaError) -> List[LabeledSpan]:
    match err:
        case RinhaArityError(function=fn, call=call):
            return [
                (call.location, "arguments given"),
                (fn.parameters_span(), "parameters expected"),
            ]
        case RinhaUnknownIdentifier(var=var):
            return [(var.location, err.message)]
        case RinhaRuntimeError() | RinhaSyntaxError():
            return [(err.location, err.message)]
        case _:
            return []


def locate(data: bytes, offset: int) -> Position:
    line_start = data.rfind(b"\n", 0, offset) + 1
    line_end = data.find(b"\n", offset)
    if line_end == -1:
        line_end = len(data)

    line = data.count(b"\n", 0, offset) + 1
    column = len(data[line_start:offset].decode("utf-8", errors="replace")) + 1

    return Position(line, column, line_start, line_end)


def render(err: RinhaError, source: Optional[str], name: Optional[str]=None) -> str:
    """Render `err` against the program text.

    Without source text, or when a span does not fit the text, the bare
    message is all that can be shown.
    """
    message = getattr(err, "message", None) or str(err)
    labels = labeled_spans(err)

    if source is None or not labels:
        return message

    data = source.encode("utf-8")
    if any(span.end > len(data) for span, _ in labels):
        return message

    first = locate(data, labels[0][0].start)
    gutter = len(str(max(locate(data, span.start).line for span, _ in labels)))
    pad = " " * gutter

    out = [f"error: {message}"]
    out.append(f"{pad}--> {name or '<input>'}:{first.line}:{first.column}")

    for span, label in labels:
        pos = locate(data, span.start)
        text = data[pos.line_start:pos.line_end].decode("utf-8", errors="replace")
        stop = min(span.end, pos.line_end)
        width = len(data[span.start:stop].decode("utf-8", errors="replace"))

        out.append(f"{pad} |")
        out.append(f"{pos.line:>{gutter}} | {text}")
        out.append(f"{pad} | {' ' * (pos.column - 1)}{'^' * max(width, 1)} {label}")

    return "\n".join(out)
