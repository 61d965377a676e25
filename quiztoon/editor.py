"""Helpers for text editors hosting a TOON document.

The editor calls these on every (debounced) change; each call re-parses the
whole buffer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ToonParseError
from .parser import parse
from .stringifier import stringify

__all__ = ["Diagnostic", "lint", "format_toon"]

_LINE_PREFIX = re.compile(r"^Line (\d+):\s*")


@dataclass(frozen=True)
class Diagnostic:
    """A problem located on one line of the document.

    ``start``/``end`` are character offsets of that line in the text.
    """

    line: int
    message: str
    start: int
    end: int
    severity: str = "error"


def _line_span(text: str, line: int) -> tuple[int, int]:
    lines = text.split("\n")
    start = sum(len(ln) + 1 for ln in lines[:line - 1])
    return start, start + len(lines[line - 1])


def lint(text: str) -> list[Diagnostic]:
    """Parse ``text`` and report the first error as a diagnostic.

    Args:
        text: Current editor buffer.

    Returns:
        An empty list for blank or valid documents, otherwise one diagnostic.
        Errors without a usable line number are placed on line 1.
    """
    if not text.strip():
        return []

    try:
        parse(text)
    except ToonParseError as e:
        error = str(e)
    else:
        return []

    line_count = text.count("\n") + 1
    match = _LINE_PREFIX.match(error)
    if match and 0 < int(match.group(1)) <= line_count:
        line = int(match.group(1))
        message = error[match.end():]
    else:
        line, message = 1, error

    start, end = _line_span(text, line)
    return [Diagnostic(line=line, message=message, start=start, end=end)]


def format_toon(text: str) -> str:
    """Rewrite a document in canonical form.

    Comments and custom layout are lost; the quiz itself is unchanged.

    Raises:
        ToonParseError: The document does not parse.
    """
    parsed = parse(text)
    return stringify(parsed.header, parsed.questions)
