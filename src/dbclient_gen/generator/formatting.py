from __future__ import annotations

import ast
import io
import tokenize
from typing import List, Set

from ..utils.errors import TemplateError

MAX_BLANK_LINES = 2

# token types that open and close a multi-part string (3.12+ f-strings, 3.14+ t-strings)
_STRING_OPENERS = {getattr(tokenize, name) for name in ("FSTRING_START", "TSTRING_START") if hasattr(tokenize, name)}
_STRING_CLOSERS = {getattr(tokenize, name) for name in ("FSTRING_END", "TSTRING_END") if hasattr(tokenize, name)}


def check_syntax(source: str, *, filename: str = "<generated>") -> None:
    """Raise SyntaxError when ``source`` is not valid Python."""
    ast.parse(source, filename=filename)


def _validate(source: str, filename: str) -> None:
    try:
        check_syntax(source, filename=filename)
    except SyntaxError as exc:
        raise TemplateError(
            ctx={"template": filename, "line": exc.lineno, "error": exc.msg},
            cause=exc,
        ) from exc


def literal_rows(source: str) -> Set[int]:
    """Rows whose line break falls inside a string literal."""
    rows: Set[int] = set()
    opened: List[int] = []
    for token in tokenize.generate_tokens(io.StringIO(source).readline):
        if token.type in _STRING_OPENERS:
            opened.append(token.start[0])
        elif token.type in _STRING_CLOSERS:
            rows.update(range(opened.pop(), token.end[0]))
        elif token.type == tokenize.STRING:
            rows.update(range(token.start[0], token.end[0]))
    return rows


def format_source(source: str, *, filename: str = "<generated>") -> str:
    """Canonicalize whitespace of generated source and re-validate it.

    Trailing whitespace is stripped and blank runs are capped at two lines,
    except on lines that continue a multi-line string literal.
    """
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    _validate(text, filename)
    protected = literal_rows(text)

    lines: List[str] = []
    blank_run = 0
    for row, line in enumerate(text.split("\n"), start=1):
        if row in protected:
            blank_run = 0
            lines.append(line)
            continue
        line = line.rstrip()
        blank_run = blank_run + 1 if not line else 0
        if blank_run > MAX_BLANK_LINES:
            continue
        lines.append(line)

    text = "\n".join(lines).strip("\n") + "\n"
    _validate(text, filename)
    return text


__all__ = ["check_syntax", "format_source", "literal_rows"]
