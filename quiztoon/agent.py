"""LLM-powered quiz generation with TOON as the output contract.

The model is asked for a TOON document; the reply is stripped of code fences
and parsed. A reply that does not parse counts as a failed generation and is
retried up to ``GeneratorConfig.max_retries`` times.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .config import GeneratorConfig
from .errors import GenerationError, ToonParseError
from .parser import parse
from .schema import ParsedQuiz
from .stringifier import example_toon

if TYPE_CHECKING:
    from anthropic import Anthropic
    from openai import OpenAI

__all__ = ["QuizGenerator", "build_generation_prompt", "extract_toon", "ingest"]

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """You are a quiz generation expert.
Write quizzes in TOON format only. No explanations, no markdown fences."""

_FORMAT_RULES = """TOON FORMAT:
quiz:
  title: <descriptive title>
  description: <one or two sentences>
  visibility: private

questions[N]{orderIndex,type,questionText}:
options[M]{questionIndex,text,isCorrect}:
orderItems[K]{questionIndex,text,correctOrder}:
matchingChoices[L]{questionIndex,text}:
matchingPairs[P]{questionIndex,leftText,correctChoiceIndex}:

RULES:
- Every section header carries its row count and field names.
- type is one of multiple-choice, ordering, matching.
- questionIndex refers to the orderIndex of the question.
- Every multiple-choice question has 3-4 options, at least one with isCorrect=true.
- Every ordering question has 3-5 items with correctOrder 0,1,2,...
- Every matching question has 3-5 matchingChoices and 2-5 matchingPairs;
  correctChoiceIndex is the zero-based position in that question's matchingChoices.
- Wrap free text containing commas or quotes in double quotes and double
  embedded quotes, e.g. "She said ""Hi""."
- Write the quiz in the language of the source material."""


def build_generation_prompt(
    source: str,
    question_count: int = 10,
    mix: tuple[int, int, int] = (60, 25, 15),
) -> str:
    """Build the user prompt for a generation request.

    Args:
        source: Learning material to write the quiz about.
        question_count: Exact number of questions to generate.
        mix: Percent of multiple-choice, ordering and matching questions.
    """
    mc, ordering, matching = mix
    return f"""{_FORMAT_RULES}

EXAMPLE:
{example_toon()}
REQUIREMENTS:
- Generate EXACTLY {question_count} questions.
- Type distribution: {mc}% multiple-choice, {ordering}% ordering, {matching}% matching.

MATERIAL:
{source}

TOON:"""


_OPEN_FENCE = re.compile(r"^```(?:toon)?\n?", re.MULTILINE)
_CLOSE_FENCE = re.compile(r"\n?```$", re.MULTILINE)


def extract_toon(text: str) -> str:
    """Remove markdown code fences around a TOON reply."""
    toon = _OPEN_FENCE.sub("", text.strip())
    toon = _CLOSE_FENCE.sub("", toon)
    return toon.strip()


def ingest(text: str) -> ParsedQuiz:
    """Parse a model reply into a quiz.

    Raises:
        ToonParseError: The reply is not a valid TOON document.
    """
    return parse(extract_toon(text))


class QuizGenerator:
    """Generate quizzes from learning material.

    Supports Anthropic and OpenAI backends.
    """

    MODELS = {
        "anthropic": "claude-sonnet-4-20250514",
        "openai": "gpt-4o-mini",
    }

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        config: GeneratorConfig | None = None,
    ):
        self.config = config or GeneratorConfig()
        self.provider = provider or self.config.provider
        if self.provider not in self.MODELS:
            raise ValueError(f"Unsupported provider: {self.provider}")
        self.model = model or self.config.model or self.MODELS[self.provider]
        self._client: Anthropic | OpenAI | None = None

    @property
    def client(self) -> Anthropic | OpenAI:
        """Lazy-load the API client."""
        if self._client is None:
            if self.provider == "openai":
                from openai import OpenAI
                self._client = OpenAI()
            else:
                from anthropic import Anthropic
                self._client = Anthropic()
        return self._client

    def generate(
        self,
        source: str,
        question_count: int = 10,
        mix: tuple[int, int, int] = (60, 25, 15),
    ) -> ParsedQuiz:
        """Generate and parse a quiz.

        Returns:
            The parsed quiz from the first reply that passes validation.

        Raises:
            GenerationError: Every attempt produced invalid TOON.
        """
        prompt = build_generation_prompt(source, question_count, mix)
        attempts = self.config.max_retries + 1
        last_error: ToonParseError | None = None

        for attempt in range(1, attempts + 1):
            raw = self.complete(prompt)
            try:
                return ingest(raw)
            except ToonParseError as e:
                last_error = e
                logger.warning("Attempt %d/%d produced invalid TOON: %s", attempt, attempts, e)

        raise GenerationError(f"No valid quiz after {attempts} attempts: {last_error}") from last_error

    def complete(self, prompt: str) -> str:
        """Send one prompt to the configured provider and return the raw text."""
        if self.provider == "openai":
            return self._call_openai(prompt)
        return self._call_anthropic(prompt)

    def _call_openai(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        return response.choices[0].message.content or ""

    def _call_anthropic(self, prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.config.max_tokens,
            system=_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
        )
        return response.content[0].text
