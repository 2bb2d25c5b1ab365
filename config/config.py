import os
from dotenv import load_dotenv
from pathlib import Path
from enum import Enum

ENV_FILE = Path(__file__).parent.parent / '.env'


class BackendName(Enum):
    """Supported generation backends."""
    OPENAI = "openai"
    GROQ = "groq"
    DEEPSEEK = "deepseek"


class RateLimitScope(Enum):
    """Admission scopes, each with its own limit and window."""
    RESEARCH = "research"
    GENERATE = "generate"
    AD = "ad"
    BOOK = "book"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        if ENV_FILE.exists():
            load_dotenv(dotenv_path=ENV_FILE)

        # Generation backends
        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.GROQ_API_KEY = os.getenv('GROQ_API_KEY')
        self.DEEPSEEK_API_KEY = os.getenv('DEEPSEEK_API_KEY')

        self.OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
        self.GROQ_MODEL = os.getenv('GROQ_MODEL', 'llama-3.3-70b-versatile')
        self.DEEPSEEK_MODEL = os.getenv('DEEPSEEK_MODEL', 'deepseek-chat')

        order = os.getenv('GENERATION_BACKENDS', 'openai,groq,deepseek')
        self.GENERATION_BACKENDS = [name.strip().lower() for name in order.split(',') if name.strip()]
        self.GENERATION_TIMEOUT_S = _env_float('GENERATION_TIMEOUT_S', 30.0)
        self.GENERATION_TEMPERATURE = _env_float('GENERATION_TEMPERATURE', 0.7)

        # Research sources
        self.BRAVE_SEARCH_API_KEY = os.getenv('BRAVE_SEARCH_API_KEY')
        self.YOUTUBE_API_KEY = os.getenv('YOUTUBE_API_KEY')
        self.NEWS_API_KEY = os.getenv('NEWS_API_KEY')

        self.RESEARCH_TIMEOUT_S = _env_float('RESEARCH_TIMEOUT_S', 10.0)
        self.RESEARCH_MAX_RESULTS = _env_int('RESEARCH_MAX_RESULTS', 5)
        self.RESEARCH_LANGUAGE = os.getenv('RESEARCH_LANGUAGE', 'en')

        # Admission control
        self.RATE_LIMIT_MAX_KEYS = _env_int('RATE_LIMIT_MAX_KEYS', 10_000)
        self.RESEARCH_RATE_LIMIT = _env_int('RESEARCH_RATE_LIMIT', 20)
        self.RESEARCH_RATE_WINDOW_MS = _env_int('RESEARCH_RATE_WINDOW_MS', 60_000)
        self.GENERATE_RATE_LIMIT = _env_int('GENERATE_RATE_LIMIT', 10)
        self.GENERATE_RATE_WINDOW_MS = _env_int('GENERATE_RATE_WINDOW_MS', 60_000)
        self.AD_RATE_LIMIT = _env_int('AD_RATE_LIMIT', 10)
        self.AD_RATE_WINDOW_MS = _env_int('AD_RATE_WINDOW_MS', 60_000)
        self.BOOK_RATE_LIMIT = _env_int('BOOK_RATE_LIMIT', 8)
        self.BOOK_RATE_WINDOW_MS = _env_int('BOOK_RATE_WINDOW_MS', 15 * 60 * 1000)

        # Books
        self.BOOK_TIMEOUT_S = _env_float('BOOK_TIMEOUT_S', 120.0)
        self.BOOK_CHAPTER_MAX_TOKENS = _env_int('BOOK_CHAPTER_MAX_TOKENS', 4000)
        self.BOOK_CHAPTER_DELAY_S = _env_float('BOOK_CHAPTER_DELAY_S', 1.0)

        # Protected routes and persistence
        self.API_KEYS = [k.strip() for k in os.getenv('API_KEYS', '').split(',') if k.strip()]
        self.HISTORY_ENABLED = _env_flag('HISTORY_ENABLED', 'true')
        self.HISTORY_DB_PATH = os.getenv(
            'HISTORY_DB_PATH', str(Path(__file__).parent.parent / 'contentforge_history.db')
        )

    def backend_credentials(self) -> dict[str, str | None]:
        """Map each known backend name to its configured API key."""
        return {
            BackendName.OPENAI.value: self.OPENAI_API_KEY,
            BackendName.GROQ.value: self.GROQ_API_KEY,
            BackendName.DEEPSEEK.value: self.DEEPSEEK_API_KEY,
        }

    def missing_credentials(self) -> list[str]:
        """
        List provider credentials that are not configured.

        Missing credentials are never fatal: the matching source adapter or
        generation backend is simply skipped.

        Returns:
            list[str]: Environment variable names that are unset
        """
        names = [
            'OPENAI_API_KEY',
            'GROQ_API_KEY',
            'DEEPSEEK_API_KEY',
            'BRAVE_SEARCH_API_KEY',
            'YOUTUBE_API_KEY',
            'NEWS_API_KEY',
        ]
        return [name for name in names if not getattr(self, name)]

    def rate_limit(self, scope: RateLimitScope) -> tuple[int, int]:
        """
        Get the admission limit for a scope.

        Returns:
            tuple[int, int]: (max requests per window, window length in ms)
        """
        prefix = scope.name
        return getattr(self, f'{prefix}_RATE_LIMIT'), getattr(self, f'{prefix}_RATE_WINDOW_MS')
