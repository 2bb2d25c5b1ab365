"""
ContentSynthesizer - ordered backend fallback chain.

Backends are tried in the configured priority order. Unconfigured backends
are skipped without a call; a failed or timed-out backend hands over to the
next one; once a backend succeeds no further backend is attempted. When the
chain is exhausted a deterministic template is returned instead.
"""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import replace

from models.errors import ProviderError
from models.generation import (
    AttemptRecord,
    GeneratedText,
    GenerationAttempt,
    GenerationRequest,
    TokenUsage,
)
from utils.logger import get_logger

from .base import BaseGenerator
from .fallback import render_article_fallback
from .prompts import ARTICLE_SYSTEM_PROMPT, build_article_prompt

logger = get_logger(__name__)

FALLBACK_PROVIDER = "template"


class ContentSynthesizer:
    def __init__(
        self,
        generators: Sequence[BaseGenerator],
        timeout_s: float = 30.0,
        temperature: float = 0.7,
    ):
        """
        Args:
            generators: Backends in priority order
            timeout_s: Per-backend request timeout in seconds
            temperature: Default sampling temperature
        """
        self.generators = list(generators)
        self.timeout_s = timeout_s
        self.temperature = temperature

    def available_backends(self) -> dict[str, bool]:
        return {generator.provider_name: generator.is_configured for generator in self.generators}

    def backend_order(self) -> list[str]:
        return [generator.provider_name for generator in self.generators]

    async def synthesize(self, request: GenerationRequest) -> GeneratedText:
        """Generate an article-style document grounded in the request's research bundle."""
        return await self.complete(
            build_article_prompt(request),
            max_tokens=request.length.max_tokens,
            fallback_text=render_article_fallback(request),
            system_prompt=ARTICLE_SYSTEM_PROMPT,
        )

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        fallback_text: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> GeneratedText:
        """
        Run ``prompt`` through the backend chain.

        Args:
            prompt: Fully built user prompt
            max_tokens: Token ceiling for the outbound call
            fallback_text: Returned verbatim when no backend succeeds
            system_prompt: Optional system message
            temperature: Overrides the default temperature

        Returns:
            GeneratedText; ``is_fallback`` tells template output apart
        """
        start = time.monotonic()
        records: list[AttemptRecord] = []

        for generator in self.generators:
            if not generator.is_configured:
                logger.debug(
                    f"Skipping unconfigured backend {generator.provider_name}",
                    extra={"extra_fields": {"provider": generator.provider_name}},
                )
                continue

            attempt = await self._attempt(
                generator,
                prompt,
                max_tokens=max_tokens,
                system_prompt=system_prompt,
                temperature=self.temperature if temperature is None else temperature,
            )
            if attempt.is_success and not attempt.text.strip():
                attempt = replace(
                    attempt,
                    error=ProviderError(
                        code="provider_error",
                        message="Empty completion",
                        provider=attempt.provider,
                        retryable=True,
                    ),
                )
            records.append(AttemptRecord.from_attempt(attempt))

            if attempt.is_success:
                return GeneratedText(
                    text=attempt.text.strip(),
                    provider=attempt.provider,
                    model=attempt.model,
                    is_fallback=False,
                    latency_ms=int((time.monotonic() - start) * 1000),
                    attempts=tuple(records),
                    token_usage=attempt.token_usage,
                )

            logger.warning(
                f"Backend {generator.provider_name} failed, trying next",
                extra={
                    "extra_fields": {
                        "provider": generator.provider_name,
                        "error_code": attempt.error.code if attempt.error else None,
                        "retryable": attempt.error.retryable if attempt.error else None,
                    }
                },
            )

        logger.warning(
            "All generation backends unavailable; returning template",
            extra={"extra_fields": {"attempted": [r.provider for r in records]}},
        )
        return GeneratedText(
            text=fallback_text,
            provider=FALLBACK_PROVIDER,
            model=FALLBACK_PROVIDER,
            is_fallback=True,
            latency_ms=int((time.monotonic() - start) * 1000),
            attempts=tuple(records),
            token_usage=TokenUsage(),
        )

    async def _attempt(
        self,
        generator: BaseGenerator,
        prompt: str,
        *,
        max_tokens: int,
        system_prompt: str | None,
        temperature: float,
    ) -> GenerationAttempt:
        """Call one backend under the request timeout; never raises."""
        started = time.monotonic()
        try:
            return await asyncio.wait_for(
                generator.attempt(
                    prompt,
                    max_tokens=max_tokens,
                    system_prompt=system_prompt,
                    temperature=temperature,
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            error = ProviderError(
                code="timeout",
                message=f"Request timed out after {self.timeout_s}s",
                provider=generator.provider_name,
                retryable=True,
                details={"timeout_seconds": self.timeout_s},
            )
        except Exception as e:
            error = ProviderError(
                code="unknown",
                message=f"Unexpected error: {e!s}",
                provider=generator.provider_name,
                details={"exception_type": type(e).__name__},
            )
            logger.error(
                f"Unexpected error for backend {generator.provider_name}: {e}",
                extra={"extra_fields": {"provider": generator.provider_name}},
                exc_info=True,
            )

        return GenerationAttempt(
            request_id=generator._generate_request_id(),
            provider=generator.provider_name,
            model=generator.model_name,
            latency_ms=int((time.monotonic() - started) * 1000),
            error=error,
        )
