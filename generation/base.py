import time
import uuid
from abc import ABC, abstractmethod

from models.errors import ProviderError
from models.generation import GenerationAttempt


class BaseGenerator(ABC):
    """
    Abstract base class for text generation backends.

    Every backend exposes the same ``attempt`` interface so the synthesizer
    can try them as an ordered list. Backends without a credential report
    ``is_configured == False`` and are skipped without a call.
    """

    provider_name: str = "unknown"

    def __init__(self, api_key: str | None, model_name: str, **kwargs):
        """
        Initialize the generator.

        Args:
            api_key: API key for the backend; ``None`` leaves it unconfigured
            model_name: Model used for every call
            **kwargs: Backend-specific parameters
        """
        self.api_key = api_key
        self.model_name = model_name

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    async def attempt(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system_prompt: str | None = None,
        temperature: float = 0.7,
    ) -> GenerationAttempt:
        """
        Generate text for ``prompt``.

        Returns:
            GenerationAttempt carrying text on success or a ProviderError

        IMPORTANT: Never raises exceptions - failures are returned as data
        """

    def _generate_request_id(self) -> str:
        return str(uuid.uuid4())

    def _measure_latency(self, start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def _normalize_error(self, exc: BaseException, provider: str) -> ProviderError:
        """
        Map an exception from any SDK/transport onto a ProviderError code.

        Typed SDK exceptions are recognised by their status code; anything
        else is classified from its message.
        """
        message = str(exc) or type(exc).__name__
        status_code = getattr(exc, "status_code", None)
        lowered = message.lower()
        details = {"exception_type": type(exc).__name__}
        if status_code is not None:
            details["status_code"] = status_code

        if isinstance(exc, TimeoutError) or "timed out" in lowered or "timeout" in lowered:
            code, retryable = "timeout", True
        elif status_code in (401, 403) or "401" in lowered or "unauthorized" in lowered:
            code, retryable = "auth", False
        elif status_code == 429 or "429" in lowered or "rate limit" in lowered:
            code, retryable = "rate_limit", True
        elif status_code == 400 or "400" in lowered or "bad request" in lowered:
            code, retryable = "bad_request", False
        elif (status_code is not None and status_code >= 500) or any(
            marker in lowered for marker in ("500", "502", "503", "504", "unavailable")
        ):
            code, retryable = "provider_error", True
        else:
            code, retryable = "unknown", False

        return ProviderError(
            code=code, message=message, provider=provider, retryable=retryable, details=details
        )

    def _create_error_attempt(
        self, *, request_id: str, error: ProviderError, latency_ms: int, model: str | None = None
    ) -> GenerationAttempt:
        return GenerationAttempt(
            request_id=request_id,
            provider=self.provider_name,
            model=model or self.model_name,
            latency_ms=latency_ms,
            error=error,
        )
