"""Pydantic models for quizzes and their questions.

Attributes are snake_case; JSON aliases are camelCase so dumped documents
match the field names used in TOON section headers (``orderIndex``,
``questionText``, ``isCorrect``...).

Note: the models do not enforce cardinality rules (minimum options, a correct
answer, ...). Those belong to :mod:`quiztoon.validator`, which can attribute
failures to source lines.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "Visibility",
    "QuestionType",
    "QuizHeader",
    "MultipleChoiceOption",
    "OrderingItem",
    "MatchingChoice",
    "MatchingPair",
    "MultipleChoiceQuestion",
    "OrderingQuestion",
    "MatchingQuestion",
    "Question",
    "ParsedQuiz",
    "new_id",
]


def new_id() -> str:
    """Return a fresh identity string."""
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Visibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
    UNLISTED = "unlisted"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    ORDERING = "ordering"
    MATCHING = "matching"


class QuizHeader(_Model):
    """Quiz-level metadata from the ``quiz:`` block."""

    title: str = ""
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    question_count: int = Field(default=0, description="Derived from the question list")


class MultipleChoiceOption(_Model):
    id: str = Field(default_factory=new_id)
    text: str
    is_correct: bool = False


class OrderingItem(_Model):
    id: str = Field(default_factory=new_id)
    text: str
    correct_order: int = 0


class MatchingChoice(_Model):
    """An entry of the shared dropdown vocabulary of a matching question."""

    id: str = Field(default_factory=new_id)
    text: str


class MatchingPair(_Model):
    """A left-hand prompt and the identity of the choice that answers it."""

    id: str = Field(default_factory=new_id)
    left_text: str
    correct_choice_id: str = ""


class _QuestionBase(_Model):
    id: str = Field(default_factory=new_id)
    quiz_id: str = ""
    order_index: int
    question_text: str
    image_url: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple-choice"] = "multiple-choice"
    options: list[MultipleChoiceOption] = Field(default_factory=list)


class OrderingQuestion(_QuestionBase):
    type: Literal["ordering"] = "ordering"
    order_items: list[OrderingItem] = Field(default_factory=list)


class MatchingQuestion(_QuestionBase):
    type: Literal["matching"] = "matching"
    matching_choices: list[MatchingChoice] = Field(default_factory=list)
    matching_pairs: list[MatchingPair] = Field(default_factory=list)


Question = Annotated[
    Union[MultipleChoiceQuestion, OrderingQuestion, MatchingQuestion],
    Field(discriminator="type"),
]


class ParsedQuiz(_Model):
    """A quiz header together with its questions, in document order."""

    header: QuizHeader = Field(default_factory=QuizHeader)
    questions: list[Question] = Field(default_factory=list)
