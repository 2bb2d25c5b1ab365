import os

import pytest

# Keep tests hermetic: never read provider credentials from the developer's shell
PROVIDER_ENV_VARS = (
    "OPENAI_API_KEY",
    "GROQ_API_KEY",
    "DEEPSEEK_API_KEY",
    "BRAVE_SEARCH_API_KEY",
    "YOUTUBE_API_KEY",
    "NEWS_API_KEY",
    "API_KEYS",
    "GENERATION_BACKENDS",
)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch, tmp_path):
    """Remove provider credentials, ignore the repo .env and disable history persistence."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("config.config.ENV_FILE", tmp_path / "missing.env")
    monkeypatch.setenv("HISTORY_ENABLED", "false")
    return os.environ
