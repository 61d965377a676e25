"""Quiz → TOON canonical writer.

Output layout:
- the ``quiz:`` block, always with title, description and visibility
- ``questions`` with every question
- ``options`` / ``orderItems`` / ``matchingChoices`` + ``matchingPairs``,
  each only when a question of that type exists

Section headers carry the true row count. Rows are indented two spaces and
joined to their question through ``orderIndex``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .cells import escape_cell
from .schema import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    QuizHeader,
    Visibility,
)

__all__ = ["stringify", "example_toon"]

_LINE_BREAKS = re.compile(r"[ \t]*(?:\r\n|\r|\n)[ \t]*")


def _section(name: str, fields: str, rows: list[str]) -> list[str]:
    return [f"{name}[{len(rows)}]{{{fields}}}:", *(f"  {row}" for row in rows), ""]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _one_line(value: str | None) -> str:
    return _LINE_BREAKS.sub(" ", value or "")


def stringify(header: QuizHeader, questions: Sequence[Question]) -> str:
    """Convert a quiz header and its questions to TOON text.

    Precondition: the questions are well-formed model objects; a pair whose
    choice cannot be found is written with index 0. Line breaks in the title
    and description become single spaces, since metadata values span one line.

    Args:
        header: Quiz header.
        questions: Questions in the order they should appear.

    Returns:
        TOON document that parses back to an equivalent quiz.
    """
    visibility = header.visibility or Visibility.PRIVATE
    lines = [
        "quiz:",
        f"  title: {_one_line(header.title)}",
        f"  description: {_one_line(header.description)}",
        f"  visibility: {Visibility(visibility).value}",
        "",
    ]

    if not questions:
        return "\n".join(lines)

    lines += _section(
        "questions",
        "orderIndex,type,questionText",
        [f"{q.order_index},{q.type},{escape_cell(q.question_text)}" for q in questions],
    )

    mc = [q for q in questions if isinstance(q, MultipleChoiceQuestion)]
    if mc:
        rows = [
            f"{q.order_index},{escape_cell(opt.text)},{_bool(opt.is_correct)}"
            for q in mc for opt in q.options
        ]
        lines += _section("options", "questionIndex,text,isCorrect", rows)

    ordering = [q for q in questions if isinstance(q, OrderingQuestion)]
    if ordering:
        rows = [
            f"{q.order_index},{escape_cell(item.text)},{item.correct_order}"
            for q in ordering for item in q.order_items
        ]
        lines += _section("orderItems", "questionIndex,text,correctOrder", rows)

    matching = [q for q in questions if isinstance(q, MatchingQuestion)]
    if matching:
        choice_rows = [
            f"{q.order_index},{escape_cell(choice.text)}"
            for q in matching for choice in q.matching_choices
        ]
        lines += _section("matchingChoices", "questionIndex,text", choice_rows)

        pair_rows = []
        for q in matching:
            positions = {choice.id: i for i, choice in enumerate(q.matching_choices)}
            for pair in q.matching_pairs:
                index = positions.get(pair.correct_choice_id, 0)
                pair_rows.append(f"{q.order_index},{escape_cell(pair.left_text)},{index}")
        lines += _section("matchingPairs", "questionIndex,leftText,correctChoiceIndex", pair_rows)

    return "\n".join(lines)


_EXAMPLE = """\
quiz:
  title: World Capitals
  description: Test your knowledge of capital cities and landmarks.
  visibility: public

questions[4]{orderIndex,type,questionText}:
  0,multiple-choice,What is the capital of Canada?
  1,multiple-choice,Which city is known as the City of Canals?
  2,ordering,Order these cities from west to east
  3,matching,Match each landmark to its city

options[6]{questionIndex,text,isCorrect}:
  0,Ottawa,true
  0,Toronto,false
  0,Vancouver,false
  1,Venice,true
  1,Paris,false
  1,Bangkok,false

orderItems[3]{questionIndex,text,correctOrder}:
  2,San Francisco,0
  2,London,1
  2,Tokyo,2

matchingChoices[3]{questionIndex,text}:
  3,Eiffel Tower
  3,Colosseum
  3,Brandenburg Gate

matchingPairs[3]{questionIndex,leftText,correctChoiceIndex}:
  3,Paris,0
  3,Rome,1
  3,Berlin,2
"""


def example_toon() -> str:
    """Return a small, valid TOON document covering every question type."""
    return _EXAMPLE
