"""Hard invariants of a parsed quiz.

Runs once, after parsing and matching resolution, and stops at the first
failure. Failures are attributed to the line of the question's row in the
``questions`` section (the title to line 1).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import NoReturn

from .errors import ToonParseError
from .schema import MatchingQuestion, MultipleChoiceQuestion, OrderingQuestion, Question, QuizHeader

__all__ = ["validate"]


def validate(header: QuizHeader, questions: Sequence[Question], line_numbers: Mapping[int, int]) -> None:
    """Check a quiz against the rules every saved quiz must satisfy.

    Args:
        header: Parsed quiz header.
        questions: Parsed questions in document order.
        line_numbers: Source line of each question row, keyed by orderIndex.

    Raises:
        ToonParseError: The first rule that does not hold.
    """
    if not header.title:
        raise ToonParseError("Quiz title is required", 1)

    if not questions:
        raise ToonParseError("At least one question is required")

    for position, question in enumerate(questions, 1):
        line = line_numbers.get(question.order_index)

        def fail(message: str) -> NoReturn:
            raise ToonParseError(f"Question {position}: {message}", line)

        if not question.question_text:
            fail("Question text is required")

        if isinstance(question, MultipleChoiceQuestion):
            if len(question.options) < 2:
                fail("At least 2 options required for multiple choice")
            if not any(opt.is_correct for opt in question.options):
                fail("At least one option must be marked as correct")
            for k, opt in enumerate(question.options, 1):
                if not opt.text:
                    fail(f"Option {k} text is required")

        elif isinstance(question, OrderingQuestion):
            if len(question.order_items) < 2:
                fail("At least 2 items required for ordering question")
            for k, item in enumerate(question.order_items, 1):
                if not item.text:
                    fail(f"Item {k} text is required")

        elif isinstance(question, MatchingQuestion):
            choices = question.matching_choices
            pairs = question.matching_pairs
            if len(choices) < 2:
                fail("At least 2 choices required for matching question")
            if len(pairs) < 2:
                fail("At least 2 pairs required for matching question")
            choice_ids = {c.id for c in choices}
            if any(not p.correct_choice_id or p.correct_choice_id not in choice_ids for p in pairs):
                fail("Each pair must reference a valid choice")
            for k, choice in enumerate(choices, 1):
                if not choice.text:
                    fail(f"Choice {k} text is required")
            for k, pair in enumerate(pairs, 1):
                if not pair.left_text:
                    fail(f"Pair {k} left text is required")
