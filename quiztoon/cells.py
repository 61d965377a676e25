"""CSV-style cell handling shared by the parser and the stringifier.

Rules:
- cells are separated by commas
- a cell starting with ``"`` (after leading whitespace) is quoted and may hold
  commas and newlines; ``""`` inside it is one literal quote
- quoted content is kept verbatim, unquoted cells are trimmed
- a quote in the middle of an unquoted cell is an ordinary character
"""

from __future__ import annotations

import io

from .errors import ToonParseError

__all__ = ["split_cells", "escape_cell", "opens_quoted_cell"]

_NEEDS_QUOTING = frozenset(',"\n')


def _scan(line: str) -> tuple[list[str], bool]:
    """Split ``line`` into cells; also report whether it ends inside quotes."""
    cells: list[str] = []
    current = io.StringIO()
    quoted = False  # current cell was opened with a quote
    in_quotes = False
    closed = False  # closing quote of a quoted cell already seen
    i = 0

    while i < len(line):
        c = line[i]
        if in_quotes:
            if c == '"':
                if line[i + 1:i + 2] == '"':
                    current.write('"')
                    i += 2
                    continue
                in_quotes = False
                closed = True
            else:
                current.write(c)
        elif c == ",":
            value = current.getvalue()
            cells.append(value if quoted else value.strip())
            current = io.StringIO()
            quoted = closed = False
        elif c == '"' and not quoted and not current.getvalue().strip():
            current = io.StringIO()
            quoted = in_quotes = True
        elif closed:
            # Only whitespace may follow a closing quote; anything else is kept.
            if not c.isspace():
                current.write(c)
        else:
            current.write(c)
        i += 1

    value = current.getvalue()
    cells.append(value if quoted else value.strip())
    return cells, in_quotes


def split_cells(line: str, line_number: int | None = None) -> list[str]:
    """Split a data row into cell values.

    Args:
        line: Row content, possibly spanning several physical lines.
        line_number: Source line used to attribute errors.

    Raises:
        ToonParseError: A quoted cell is never closed.
    """
    cells, unterminated = _scan(line)
    if unterminated:
        raise ToonParseError("Unterminated quoted value", line_number)
    return cells


def opens_quoted_cell(line: str) -> bool:
    """Check whether ``line`` ends inside a quoted cell."""
    return _scan(line)[1]


def escape_cell(value: str) -> str:
    """Quote a cell value if it holds a comma, a quote or a newline."""
    if not value:
        return ""
    if any(c in _NEEDS_QUOTING for c in value):
        return '"' + value.replace('"', '""') + '"'
    return value
