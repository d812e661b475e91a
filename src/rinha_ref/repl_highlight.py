"""prompt_toolkit lexer for live rinha syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from lark import Token
from lark.exceptions import LarkError
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import make_parser

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "builtin": "bold ansiyellow",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

KEYWORDS = {"let", "fn", "if", "else"}
BOOLEANS = {"true", "false"}
BUILTINS = {"print", "first", "second"}

_TYPE_GROUP = {
    "IDENT": "identifier",
    "INT": "number",
    "STRING": "string",
    "LINE_COMMENT": "comment",
    "BLOCK_COMMENT": "comment",
    "OR_OP": "operator",
    "AND_OP": "operator",
    "EQ_OP": "operator",
    "CMP_OP": "operator",
    "ADD_OP": "operator",
    "MUL_OP": "operator",
}


def token_group(tok: Token) -> str:
    value = str(tok)

    if value in KEYWORDS:
        return "keyword"
    if value in BOOLEANS:
        return "boolean"
    if value in BUILTINS:
        return "builtin"

    return _TYPE_GROUP.get(tok.type, "punctuation")


def highlight_line(text: str) -> StyleAndTextTuples:
    result: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in make_parser().lex(text, dont_ignore=True):
            start = tok.start_pos
            if start > pos:
                result.append(("", text[pos:start]))

            result.append((GROUP_STYLE[token_group(tok)], str(tok)))
            pos = tok.end_pos
    except LarkError:
        # keep what lexed cleanly, flag the rest
        result.append((GROUP_STYLE["error"], text[pos:]))
        return result

    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class RinhaLexer(Lexer):
    """prompt_toolkit Lexer that highlights rinha source using the lark lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
