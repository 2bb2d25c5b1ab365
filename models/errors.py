from dataclasses import dataclass, field
from typing import Any

PROVIDER_ERROR_CODES = {
    "timeout",
    "auth",
    "rate_limit",
    "bad_request",
    "provider_error",
    "missing_credential",
    "unknown",
}


class ContentForgeError(Exception):
    """Base class for errors that surface to API callers."""


class ValidationError(ContentForgeError):
    """Malformed or out-of-range request input. Never retried."""

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.message = message
        self.field_name = field_name


class RateLimitExceeded(ContentForgeError):
    """A client key exhausted its admission window."""

    def __init__(self, key: str, limit: int, retry_after_ms: int):
        super().__init__(f"Rate limit of {limit} requests exceeded")
        self.key = key
        self.limit = limit
        self.retry_after_ms = retry_after_ms

    @property
    def retry_after_s(self) -> int:
        # Retry-After is whole seconds; round up so clients never retry early
        return max(1, -(-self.retry_after_ms // 1000))


@dataclass(frozen=True)
class ProviderError:
    """
    A failure talking to an external source or generation backend.

    Always recovered locally (empty result or next backend); never raised.
    """

    code: str
    message: str
    provider: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.code not in PROVIDER_ERROR_CODES:
            object.__setattr__(self, "code", "unknown")
