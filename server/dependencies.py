"""FastAPI dependencies for authentication, admission control and shared services."""

from fastapi import Depends, Header, HTTPException, Request, Response, status

from config.config import Config, RateLimitScope
from generation.synthesizer import ContentSynthesizer
from models.errors import RateLimitExceeded
from research.aggregator import ResearchAggregator
from server.database import HistoryStore
from server.utils import client_ip, redact_sensitive_headers
from utils.logger import get_logger
from utils.rate_limiter import FixedWindowRateLimiter

logger = get_logger(__name__)


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def get_aggregator(request: Request) -> ResearchAggregator:
    return request.app.state.aggregator


def get_synthesizer(request: Request) -> ContentSynthesizer:
    return request.app.state.synthesizer


def get_history_store(request: Request) -> HistoryStore | None:
    """The history store, or None when persistence is disabled."""
    return getattr(request.app.state, "history", None)


def rate_limited(scope: RateLimitScope):
    """
    Build a dependency that admits or rejects the caller for ``scope``.

    The client key is ``<scope>:<ip>`` so scopes keep independent windows.
    """

    async def _admit(
        request: Request,
        response: Response,
        config: Config = Depends(get_config),
        limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    ) -> None:
        limit, window_ms = config.rate_limit(scope)
        key = f"{scope.value}:{client_ip(request)}"
        decision = limiter.admit(key, limit, window_ms)

        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "extra_fields": {
                        "request_id": getattr(request.state, "request_id", "unknown"),
                        "scope": scope.value,
                        "limit": limit,
                        "retry_after_ms": decision.retry_after_ms,
                    }
                },
            )
            raise RateLimitExceeded(key=key, limit=limit, retry_after_ms=decision.retry_after_ms)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)

    return _admit


async def get_api_key(
    request: Request,
    x_api_key: str | None = Header(None),
    config: Config = Depends(get_config),
):
    """Validate API key from X-API-Key header."""
    request_id = getattr(request.state, "request_id", "unknown")
    redacted_headers = redact_sensitive_headers(dict(request.headers))

    if not config.API_KEYS:
        logger.error(
            "API authentication not configured",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication not configured",
        )

    if not x_api_key or x_api_key not in config.API_KEYS:
        logger.warning(
            "API authentication failed",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key
