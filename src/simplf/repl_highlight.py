"""prompt_toolkit lexer for live Simplf syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from lark import Token, UnexpectedCharacters
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import make_parser

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

KEYWORDS = frozenset({"and", "else", "for", "fun", "if", "or", "print", "return", "var", "while"})

_TYPE_GROUP = {
    "TRUE": "boolean",
    "FALSE": "boolean",
    "NIL": "constant",
    "NUMBER": "number",
    "STRING": "string",
    "IDENTIFIER": "identifier",
    "COMMENT": "comment",
    "PLUS": "operator",
    "MINUS": "operator",
    "STAR": "operator",
    "SLASH": "operator",
    "BANG": "operator",
    "BANG_EQUAL": "operator",
    "EQUAL_EQUAL": "operator",
    "GREATER": "operator",
    "GREATER_EQUAL": "operator",
    "LESS": "operator",
    "LESS_EQUAL": "operator",
}


def token_group(tok: Token) -> str:
    if str(tok) in KEYWORDS:
        return "keyword"

    group = _TYPE_GROUP.get(tok.type)
    if group is not None:
        return group

    # Anonymous terminals: `=`, `?`, `:` and the brackets.
    return "operator" if str(tok) in {"=", "?", ":"} else "punctuation"

def highlight_fragments(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in make_parser().lex(text, dont_ignore=True):
            start = tok.start_pos if tok.start_pos is not None else pos
            if start > pos:
                result.append(("", text[pos:start]))

            tok_text = str(tok)
            style = "" if tok.type == "WS" else GROUP_STYLE.get(token_group(tok), "")
            result.append((style, tok_text))
            pos = start + len(tok_text)
    except UnexpectedCharacters:
        # Everything from the first unlexable character on.
        result.append((GROUP_STYLE["error"], text[pos:]))
        return result

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class SimplfLexer(Lexer):
    """prompt_toolkit Lexer that highlights Simplf source using the grammar's terminals."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_fragments(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
