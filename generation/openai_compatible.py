import time

import openai

from models.errors import ProviderError
from models.generation import GenerationAttempt, TokenUsage
from utils.logger import get_logger

from .base import BaseGenerator

logger = get_logger(__name__)


class OpenAICompatibleGenerator(BaseGenerator):
    """
    Chat-completions backend built on the OpenAI SDK.

    Groq and DeepSeek expose OpenAI-compatible APIs, so they reuse this class
    with a custom base URL. SDK retries are disabled: retry and fallback
    policy belongs to the synthesizer.
    """

    provider_name = "openai"
    base_url: str | None = None
    default_model = "gpt-4o-mini"

    def __init__(self, api_key: str | None, model_name: str | None = None, **kwargs):
        """
        Initialize the backend.

        Args:
            api_key: Backend API key; no SDK client is built without one
            model_name: Model to use (defaults to the backend's default_model)
            **kwargs: Additional keyword arguments
                - timeout_s: Transport timeout for the SDK client
        """
        super().__init__(api_key, model_name or self.default_model, **kwargs)
        self.client = None
        if api_key:
            self.client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                timeout=kwargs.get("timeout_s", 30.0),
                max_retries=0,
            )

    async def attempt(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system_prompt: str | None = None,
        temperature: float = 0.7,
    ) -> GenerationAttempt:
        request_id = self._generate_request_id()
        start_time = time.time()

        if self.client is None:
            return self._create_error_attempt(
                request_id=request_id,
                error=ProviderError(
                    code="missing_credential",
                    message=f"{self.provider_name} API key not configured",
                    provider=self.provider_name,
                ),
                latency_ms=0,
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            latency_ms = self._measure_latency(start_time)

            text = ""
            if response.choices:
                text = (response.choices[0].message.content or "").strip()
            if not text:
                return self._create_error_attempt(
                    request_id=request_id,
                    error=ProviderError(
                        code="provider_error",
                        message="Empty completion",
                        provider=self.provider_name,
                        retryable=True,
                    ),
                    latency_ms=latency_ms,
                )

            usage = getattr(response, "usage", None)
            token_usage = TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            )

            logger.info(
                f"{self.provider_name} completion successful",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": self.model_name,
                        "latency_ms": latency_ms,
                        "tokens": token_usage.total_tokens,
                    }
                },
            )

            return GenerationAttempt(
                request_id=request_id,
                provider=self.provider_name,
                model=self.model_name,
                latency_ms=latency_ms,
                text=text,
                token_usage=token_usage,
            )

        except Exception as e:
            latency_ms = self._measure_latency(start_time)
            error = self._normalize_error(e, provider=self.provider_name)

            logger.error(
                f"{self.provider_name} completion failed: {error.code}",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": self.model_name,
                        "error_code": error.code,
                        "error_message": error.message,
                        "retryable": error.retryable,
                    }
                },
            )

            return self._create_error_attempt(
                request_id=request_id, error=error, latency_ms=latency_ms
            )


class OpenAIGenerator(OpenAICompatibleGenerator):
    provider_name = "openai"
    default_model = "gpt-4o-mini"


class GroqGenerator(OpenAICompatibleGenerator):
    provider_name = "groq"
    base_url = "https://api.groq.com/openai/v1"
    default_model = "llama-3.3-70b-versatile"


class DeepSeekGenerator(OpenAICompatibleGenerator):
    """
    Options:
        - "deepseek-chat": general writing
        - "deepseek-reasoner": reasoning-heavy tasks
    """

    provider_name = "deepseek"
    base_url = "https://api.deepseek.com/v1"
    default_model = "deepseek-chat"
