"""Exception types raised by quiztoon."""

from __future__ import annotations

__all__ = ["ToonError", "ToonParseError", "GenerationError"]


class ToonError(Exception):
    """Base class for all quiztoon errors."""


class ToonParseError(ToonError):
    """A TOON document could not be parsed or failed validation.

    Rendered as ``Line <n>: <message>`` when the offending line is known so
    that editors can place the message next to it.
    """

    def __init__(self, message: str, line_number: int | None = None):
        self.message = message
        self.line_number = line_number
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"Line {self.line_number}: {self.message}"
        return self.message


class GenerationError(ToonError):
    """The generator gave up after every attempt produced invalid TOON."""
