"""
Unit tests for AI ingestion and the quiz generator.
"""
from unittest.mock import Mock

import pytest

from quiztoon import GenerationError, ToonParseError, example_toon, extract_toon, ingest
from quiztoon.agent import QuizGenerator, build_generation_prompt
from quiztoon.config import GeneratorConfig


def _anthropic_reply(text):
    return Mock(content=[Mock(text=text)])


def _openai_reply(text):
    return Mock(choices=[Mock(message=Mock(content=text))])


@pytest.fixture
def generator():
    """A generator with a mocked Anthropic client and one retry."""
    gen = QuizGenerator(provider="anthropic", config=GeneratorConfig(max_retries=1))
    gen._client = Mock()
    return gen


@pytest.mark.parametrize(
    "reply",
    [
        "quiz:\n  title: T",
        "```toon\nquiz:\n  title: T\n```",
        "```\nquiz:\n  title: T\n```\n",
        "  \n```toon\nquiz:\n  title: T```",
    ],
)
def test_extract_toon_strips_fences(reply):
    """Test removal of markdown code fences."""
    assert extract_toon(reply) == "quiz:\n  title: T"


def test_ingest_fenced_reply():
    """Test parsing a fenced model reply."""
    quiz = ingest(f"```toon\n{example_toon()}```")

    assert quiz.header.title == "World Capitals"
    assert len(quiz.questions) == 4


def test_build_generation_prompt():
    """Test that the prompt carries the format contract and the request."""
    prompt = build_generation_prompt("Photosynthesis notes", question_count=7, mix=(50, 30, 20))

    assert "questions[N]{orderIndex,type,questionText}:" in prompt
    assert "Generate EXACTLY 7 questions." in prompt
    assert "50% multiple-choice, 30% ordering, 20% matching" in prompt
    assert "Photosynthesis notes" in prompt
    assert example_toon() in prompt


def test_unsupported_provider():
    """Test provider validation."""
    with pytest.raises(ValueError, match="Unsupported provider"):
        QuizGenerator(provider="gemini")


def test_model_resolution():
    """Test explicit model, config model and provider default."""
    assert QuizGenerator(provider="openai").model == "gpt-4o-mini"
    assert QuizGenerator(config=GeneratorConfig(model="from-config")).model == "from-config"
    assert QuizGenerator(model="explicit", config=GeneratorConfig(model="from-config")).model == "explicit"


def test_generate_success(generator):
    """Test a generation whose first reply is valid."""
    generator.client.messages.create.return_value = _anthropic_reply(f"```toon\n{example_toon()}```")

    quiz = generator.generate("Capitals of the world", question_count=4)

    assert quiz.header.title == "World Capitals"
    generator.client.messages.create.assert_called_once()
    kwargs = generator.client.messages.create.call_args.kwargs
    assert kwargs["model"] == QuizGenerator.MODELS["anthropic"]
    assert kwargs["max_tokens"] == 8192
    assert "Generate EXACTLY 4 questions." in kwargs["messages"][0]["content"]


def test_generate_retries_invalid_reply(generator, caplog):
    """Test that an invalid reply is retried."""
    generator.client.messages.create.side_effect = [
        _anthropic_reply("quiz:\n  title: Empty"),
        _anthropic_reply(example_toon()),
    ]

    quiz = generator.generate("material")

    assert len(quiz.questions) == 4
    assert generator.client.messages.create.call_count == 2
    assert "Attempt 1/2 produced invalid TOON" in caplog.text


def test_generate_gives_up(generator):
    """Test that the generator raises after the last attempt."""
    generator.client.messages.create.return_value = _anthropic_reply("quiz:\n  description: no title")

    with pytest.raises(GenerationError, match="No valid quiz after 2 attempts") as exc:
        generator.generate("material")

    assert isinstance(exc.value.__cause__, ToonParseError)
    assert generator.client.messages.create.call_count == 2


def test_generate_with_openai():
    """Test the OpenAI code path."""
    gen = QuizGenerator(provider="openai", config=GeneratorConfig(max_retries=0))
    gen._client = Mock()
    gen.client.chat.completions.create.return_value = _openai_reply(example_toon())

    quiz = gen.generate("material")

    assert quiz.header.question_count == 4
    messages = gen.client.chat.completions.create.call_args.kwargs["messages"]
    assert [m["role"] for m in messages] == ["system", "user"]
