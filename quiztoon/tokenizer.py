"""Line classifier for TOON text.

Turns raw text into ``(content, line_number)`` pairs: blank lines and ``#``
comments are dropped, everything else is trimmed and keeps its 1-based line
number for error reporting.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from .cells import opens_quoted_cell
from .errors import ToonParseError

__all__ = ["SourceLine", "tokenize"]

# `key: value` lines never continue; their values are not CSV cells.
_KEY_VALUE = re.compile(r"^[A-Za-z_][\w-]*\s*:")


class SourceLine(NamedTuple):
    content: str
    line_number: int


def tokenize(text: str) -> list[SourceLine]:
    """Split TOON text into significant lines.

    A row whose last cell opens a quote that is not closed on the same line
    continues on the following physical lines, verbatim, until the quote
    closes. The joined line keeps the number of its first physical line.

    Args:
        text: Raw TOON document.

    Returns:
        Significant lines in document order.

    Raises:
        ToonParseError: A quoted value is still open at the end of the text.
    """
    raw_lines = text.split("\n")
    result: list[SourceLine] = []
    i = 0

    while i < len(raw_lines):
        line_number = i + 1
        content = raw_lines[i].strip()
        i += 1
        if not content or content.startswith("#"):
            continue

        if not _KEY_VALUE.match(content) and opens_quoted_cell(content):
            # Restart from the raw line so whitespace before the line break survives.
            parts = [raw_lines[i - 1].rstrip("\r").lstrip()]
            while opens_quoted_cell("\n".join(parts)):
                if i >= len(raw_lines):
                    raise ToonParseError("Unterminated quoted value", line_number)
                parts.append(raw_lines[i].rstrip("\r"))
                i += 1
            content = "\n".join(parts).rstrip()

        result.append(SourceLine(content, line_number))

    return result
