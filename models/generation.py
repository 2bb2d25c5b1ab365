from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from models.errors import ProviderError
from models.research import ResearchBundle


class ContentLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def max_tokens(self) -> int:
        """Token ceiling enforced on the outbound backend call."""
        return _LENGTH_TOKENS[self]

    @property
    def word_target(self) -> str:
        return _LENGTH_WORDS[self]


_LENGTH_TOKENS = {ContentLength.SHORT: 500, ContentLength.MEDIUM: 1000, ContentLength.LONG: 2000}
_LENGTH_WORDS = {ContentLength.SHORT: "300-500", ContentLength.MEDIUM: "800-1200", ContentLength.LONG: "2000+"}


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if self.total_tokens == 0 and (self.prompt_tokens > 0 or self.completion_tokens > 0):
            object.__setattr__(self, "total_tokens", self.prompt_tokens + self.completion_tokens)


@dataclass(frozen=True)
class GenerationRequest:
    bundle: ResearchBundle
    topic: str
    language: str = "en"
    tone: str = "professional"
    content_type: str = "article"
    length: ContentLength = ContentLength.MEDIUM
    audience: str = "general readers"


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of one backend call: text on success, a ProviderError otherwise."""

    request_id: str
    provider: str
    model: str
    latency_ms: int
    text: str = ""
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    error: ProviderError | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AttemptRecord:
    provider: str
    model: str
    ok: bool
    latency_ms: int
    error_code: str | None = None

    @classmethod
    def from_attempt(cls, attempt: GenerationAttempt) -> "AttemptRecord":
        return cls(
            provider=attempt.provider,
            model=attempt.model,
            ok=attempt.is_success,
            latency_ms=attempt.latency_ms,
            error_code=attempt.error.code if attempt.error else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "model": self.model,
            "ok": self.ok,
            "latencyMs": self.latency_ms,
            "errorCode": self.error_code,
        }


@dataclass(frozen=True)
class GeneratedText:
    text: str
    provider: str
    model: str
    is_fallback: bool
    latency_ms: int
    attempts: tuple[AttemptRecord, ...] = ()
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )
