"""
Unit tests for generator configuration.
"""
import pytest

from quiztoon.config import GeneratorConfig

_VARS = ["QUIZTOON_PROVIDER", "QUIZTOON_MODEL", "QUIZTOON_MAX_RETRIES", "QUIZTOON_MAX_TOKENS", "QUIZTOON_TEMPERATURE"]


@pytest.fixture
def clean_env(monkeypatch):
    """Unset all QUIZTOON_* variables and restore them afterwards."""
    for name in _VARS:
        # setenv first so teardown also removes values loaded from a .env file
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    """Test defaults when nothing is configured."""
    config = GeneratorConfig.from_env(str(tmp_path / "missing.env"))

    assert config == GeneratorConfig()
    assert config.provider == "anthropic"
    assert config.max_retries == 1


def test_from_environment(clean_env, tmp_path):
    """Test values taken from environment variables."""
    clean_env.setenv("QUIZTOON_PROVIDER", "openai")
    clean_env.setenv("QUIZTOON_MODEL", "gpt-4o")
    clean_env.setenv("QUIZTOON_MAX_RETRIES", "3")
    clean_env.setenv("QUIZTOON_TEMPERATURE", "0.4")

    config = GeneratorConfig.from_env(str(tmp_path / "missing.env"))

    assert config.provider == "openai"
    assert config.model == "gpt-4o"
    assert config.max_retries == 3
    assert config.max_tokens == 8192
    assert config.temperature == pytest.approx(0.4)


def test_from_dotenv_file(clean_env, tmp_path):
    """Test loading a .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text("QUIZTOON_MODEL=claude-test\nQUIZTOON_MAX_TOKENS=1024\n")

    config = GeneratorConfig.from_env(str(env_file))

    assert config.model == "claude-test"
    assert config.max_tokens == 1024


def test_invalid_number(clean_env, tmp_path):
    """Test that malformed numbers are rejected."""
    clean_env.setenv("QUIZTOON_MAX_RETRIES", "many")

    with pytest.raises(ValueError, match="QUIZTOON_MAX_RETRIES is not a valid int"):
        GeneratorConfig.from_env(str(tmp_path / "missing.env"))
