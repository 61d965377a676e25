"""Configuration for the quiz generator.

Values come from the environment (optionally a ``.env`` file):

    QUIZTOON_PROVIDER      anthropic | openai   (default: anthropic)
    QUIZTOON_MODEL         model name override
    QUIZTOON_MAX_RETRIES   extra attempts after an invalid reply (default: 1)
    QUIZTOON_MAX_TOKENS    completion budget (default: 8192)
    QUIZTOON_TEMPERATURE   sampling temperature (default: 0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

__all__ = ["GeneratorConfig"]


@dataclass
class GeneratorConfig:
    """Settings for :class:`quiztoon.agent.QuizGenerator`."""
    provider: str = "anthropic"
    model: Optional[str] = None
    max_retries: int = 1
    max_tokens: int = 8192
    temperature: float = 0.0

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "GeneratorConfig":
        """
        Build a config from environment variables.

        Args:
            dotenv_path: Explicit .env file; by default one is searched for
                from the working directory upwards.

        Raises:
            ValueError: A numeric variable cannot be parsed.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        env = os.environ
        return cls(
            provider=env.get("QUIZTOON_PROVIDER", cls.provider),
            model=env.get("QUIZTOON_MODEL") or None,
            max_retries=_number(env, "QUIZTOON_MAX_RETRIES", int, cls.max_retries),
            max_tokens=_number(env, "QUIZTOON_MAX_TOKENS", int, cls.max_tokens),
            temperature=_number(env, "QUIZTOON_TEMPERATURE", float, cls.temperature),
        )


def _number(env, name, kind, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} is not a valid {kind.__name__}: {raw!r}") from None
