"""quiztoon - TOON format engine for quizzes.

Parses the line-oriented TOON text format into a quiz header plus typed
questions, and writes quizzes back as canonical TOON.

Example:
    >>> from quiztoon import parse, stringify
    >>> quiz = parse(Path("quiz.toon").read_text())
    >>> print(stringify(quiz.header, quiz.questions))
"""

from .agent import QuizGenerator, extract_toon, ingest
from .editor import Diagnostic, format_toon, lint
from .errors import GenerationError, ToonError, ToonParseError
from .parser import parse
from .schema import (
    MatchingChoice,
    MatchingPair,
    MatchingQuestion,
    MultipleChoiceOption,
    MultipleChoiceQuestion,
    OrderingItem,
    OrderingQuestion,
    ParsedQuiz,
    Question,
    QuestionType,
    QuizHeader,
    Visibility,
)
from .stringifier import example_toon, stringify

__all__ = [
    "parse",
    "stringify",
    "example_toon",
    "format_toon",
    "lint",
    "Diagnostic",
    "extract_toon",
    "ingest",
    "QuizGenerator",
    "ToonError",
    "ToonParseError",
    "GenerationError",
    "ParsedQuiz",
    "QuizHeader",
    "Visibility",
    "QuestionType",
    "Question",
    "MultipleChoiceQuestion",
    "OrderingQuestion",
    "MatchingQuestion",
    "MultipleChoiceOption",
    "OrderingItem",
    "MatchingChoice",
    "MatchingPair",
]
