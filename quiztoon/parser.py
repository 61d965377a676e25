"""TOON → quiz parser.

A section state machine over the significant lines of a document. Every data
section is joined to its question through the ``orderIndex`` key, so the
parser keeps flat drafts keyed by that index and only builds the final
models once all lines are consumed.

Two phases for matching questions: pairs keep the raw ``correctChoiceIndex``
while parsing (choices may come later in the text), then a resolution pass
maps each index to the identity of the choice at that position.

Lenient on purpose (logged, not fatal):
- unknown metadata keys
- unknown visibility values (fall back to ``private``)
- rows for a missing question or a question of another type (dropped)
- out-of-range ``correctChoiceIndex`` (falls back to the first choice)
- section counts that disagree with the actual number of rows
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .cells import split_cells
from .errors import ToonParseError
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
    new_id,
)
from .tokenizer import SourceLine, tokenize
from .validator import validate

__all__ = ["parse", "SECTIONS"]

logger = logging.getLogger(__name__)

# Section name in the text → parser state
SECTIONS = {
    "questions": "questions",
    "options": "options",
    "orderItems": "order-items",
    "matchingChoices": "matching-choices",
    "matchingPairs": "matching-pairs",
}

_SECTION_HEADER = re.compile(r"^(\w+)\[(\d+)\]\{(.+)\}:$")
_HEADER_LIKE = re.compile(r"^[A-Za-z_]\w*\[")
_QUESTION_INDEX_COLUMNS = ("questionIndex", "questionId")


@dataclass
class _PairDraft:
    left_text: str
    choice_index: int


@dataclass
class _QuestionDraft:
    order_index: int
    type: QuestionType
    question_text: str
    options: list[MultipleChoiceOption] = field(default_factory=list)
    order_items: list[OrderingItem] = field(default_factory=list)
    matching_choices: list[MatchingChoice] = field(default_factory=list)
    pair_drafts: list[_PairDraft] = field(default_factory=list)
    matching_pairs: list[MatchingPair] = field(default_factory=list)


@dataclass
class _Section:
    name: str
    declared_count: int
    columns: list[str]
    line_number: int
    rows: int = 0


@dataclass
class _ParseState:
    header: QuizHeader = field(default_factory=QuizHeader)
    drafts: dict[int, _QuestionDraft] = field(default_factory=dict)
    line_numbers: dict[int, int] = field(default_factory=dict)
    state: str = "metadata"
    section: _Section | None = None


def parse(text: str) -> ParsedQuiz:
    """Parse a TOON document into a quiz header and its questions.

    Args:
        text: TOON document.

    Returns:
        ParsedQuiz whose questions follow the order in which their
        ``orderIndex`` first appeared.

    Raises:
        ToonParseError: On a grammar error or a failed validation rule. The
            message carries the offending line number when known.
    """
    st = _ParseState()

    for line in tokenize(text):
        _consume(st, line)
    _close_section(st)

    _resolve_matching_pairs(st.drafts.values())

    now = datetime.now(timezone.utc)
    questions = [_build_question(draft, now) for draft in st.drafts.values()]
    st.header.question_count = len(questions)

    validate(st.header, questions, st.line_numbers)
    return ParsedQuiz(header=st.header, questions=questions)


def _consume(st: _ParseState, line: SourceLine) -> None:
    content, line_number = line

    if content.startswith("quiz:"):
        _close_section(st)
        st.state = "metadata"
        return

    if _HEADER_LIKE.match(content):
        _open_section(st, line)
        return

    if st.state == "metadata":
        _parse_metadata(st.header, line)
        return

    if st.section is None:
        raise ToonParseError(f"Data row outside of a section: '{content}'", line_number)
    st.section.rows += 1
    row = _row(st.section.columns, split_cells(content, line_number))

    if st.state == "questions":
        _parse_question(st, row, line_number)
    elif st.state == "options":
        _parse_option(st.drafts, row, line_number)
    elif st.state == "order-items":
        _parse_order_item(st.drafts, row, line_number)
    elif st.state == "matching-choices":
        _parse_matching_choice(st.drafts, row, line_number)
    elif st.state == "matching-pairs":
        _parse_matching_pair(st.drafts, row, line_number)


def _open_section(st: _ParseState, line: SourceLine) -> None:
    content, line_number = line
    match = _SECTION_HEADER.match(content)
    if not match:
        raise ToonParseError(
            f"Invalid section header '{content}'; expected name[count]{{field,...}}:",
            line_number,
        )
    name, count, columns = match.groups()
    if name not in SECTIONS:
        known = ", ".join(SECTIONS)
        raise ToonParseError(f"Unknown section '{name}'; expected one of {known}", line_number)

    _close_section(st)
    st.state = SECTIONS[name]
    st.section = _Section(
        name=name,
        declared_count=int(count),
        columns=[c.strip() for c in columns.split(",")],
        line_number=line_number,
    )


def _close_section(st: _ParseState) -> None:
    """Note a mismatch between the declared and the actual row count."""
    section = st.section
    if section is not None and section.rows != section.declared_count:
        logger.debug(
            "Section %s (line %d) declares %d rows but has %d",
            section.name, section.line_number, section.declared_count, section.rows,
        )
    st.section = None


def _parse_metadata(header: QuizHeader, line: SourceLine) -> None:
    content, line_number = line
    if ":" not in content:
        raise ToonParseError(f"Expected 'key: value' in quiz block, got '{content}'", line_number)

    key, value = content.split(":", 1)
    key, value = key.strip(), value.strip()

    if key == "title":
        header.title = value
    elif key == "description":
        header.description = value
    elif key == "visibility":
        try:
            header.visibility = Visibility(value)
        except ValueError:
            logger.warning("Line %d: unknown visibility '%s', using private", line_number, value)
            header.visibility = Visibility.PRIVATE


def _row(columns: list[str], values: list[str]) -> dict[str, str]:
    """Map cell values to column names; missing cells read as ''."""
    return {name: values[i] if i < len(values) else "" for i, name in enumerate(columns)}


def _int_cell(row: dict[str, str], names: tuple[str, ...], default: int, line_number: int) -> int:
    for name in names:
        if name in row:
            value = row[name]
            try:
                return int(value)
            except ValueError:
                raise ToonParseError(f"Invalid integer for '{name}': '{value}'", line_number) from None
    return default


def _parse_question(st: _ParseState, row: dict[str, str], line_number: int) -> None:
    order_index = _int_cell(row, ("orderIndex",), len(st.drafts), line_number)

    type_value = row.get("type", QuestionType.MULTIPLE_CHOICE.value)
    try:
        question_type = QuestionType(type_value)
    except ValueError:
        known = ", ".join(t.value for t in QuestionType)
        raise ToonParseError(
            f"Unknown question type '{type_value}'; expected one of {known}", line_number
        ) from None

    st.drafts[order_index] = _QuestionDraft(
        order_index=order_index,
        type=question_type,
        question_text=row.get("questionText", ""),
    )
    st.line_numbers[order_index] = line_number


def _target(
    drafts: dict[int, _QuestionDraft],
    row: dict[str, str],
    expected: QuestionType,
    line_number: int,
) -> _QuestionDraft | None:
    """Find the question a dependent row belongs to, or None to drop the row."""
    index = _int_cell(row, _QUESTION_INDEX_COLUMNS, 0, line_number)
    draft = drafts.get(index)
    if draft is None:
        logger.warning("Line %d: no question with index %d, row dropped", line_number, index)
        return None
    if draft.type is not expected:
        logger.warning(
            "Line %d: question %d is %s, not %s; row dropped",
            line_number, index, draft.type.value, expected.value,
        )
        return None
    return draft


def _parse_option(drafts: dict[int, _QuestionDraft], row: dict[str, str], line_number: int) -> None:
    draft = _target(drafts, row, QuestionType.MULTIPLE_CHOICE, line_number)
    if draft is not None:
        draft.options.append(MultipleChoiceOption(
            text=row.get("text", ""),
            is_correct=row.get("isCorrect", "").lower() == "true",
        ))


def _parse_order_item(drafts: dict[int, _QuestionDraft], row: dict[str, str], line_number: int) -> None:
    draft = _target(drafts, row, QuestionType.ORDERING, line_number)
    if draft is not None:
        draft.order_items.append(OrderingItem(
            text=row.get("text", ""),
            correct_order=_int_cell(row, ("correctOrder",), 0, line_number),
        ))


def _parse_matching_choice(drafts: dict[int, _QuestionDraft], row: dict[str, str], line_number: int) -> None:
    draft = _target(drafts, row, QuestionType.MATCHING, line_number)
    if draft is not None:
        draft.matching_choices.append(MatchingChoice(text=row.get("text", "")))


def _parse_matching_pair(drafts: dict[int, _QuestionDraft], row: dict[str, str], line_number: int) -> None:
    draft = _target(drafts, row, QuestionType.MATCHING, line_number)
    if draft is not None:
        draft.pair_drafts.append(_PairDraft(
            left_text=row.get("leftText", ""),
            choice_index=_int_cell(row, ("correctChoiceIndex",), 0, line_number),
        ))


def _resolve_matching_pairs(drafts: Iterable[_QuestionDraft]) -> None:
    """Turn positional choice references into choice identities."""
    for draft in drafts:
        if draft.type is not QuestionType.MATCHING:
            continue
        choices = draft.matching_choices
        for pair in draft.pair_drafts:
            index = pair.choice_index if 0 <= pair.choice_index < len(choices) else 0
            choice_id = choices[index].id if choices else ""
            draft.matching_pairs.append(MatchingPair(left_text=pair.left_text, correct_choice_id=choice_id))


def _build_question(draft: _QuestionDraft, now: datetime) -> Question:
    common = dict(
        id=new_id(),
        order_index=draft.order_index,
        question_text=draft.question_text,
        created_at=now,
        updated_at=now,
    )
    if draft.type is QuestionType.ORDERING:
        return OrderingQuestion(order_items=draft.order_items, **common)
    if draft.type is QuestionType.MATCHING:
        return MatchingQuestion(
            matching_choices=draft.matching_choices,
            matching_pairs=draft.matching_pairs,
            **common,
        )
    return MultipleChoiceQuestion(options=draft.options, **common)
