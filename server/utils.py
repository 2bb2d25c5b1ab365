"""Shared utilities for FastAPI routes."""

from collections.abc import Mapping

from fastapi import Request

SENSITIVE_HEADERS = {"x-api-key", "authorization", "cookie"}

AD_MAX_TOKENS_DEFAULT = 150
AD_MAX_TOKENS_CEILING = 300
AD_TEMPERATURE_DEFAULT = 0.7


def client_ip(request: Request) -> str:
    """Resolve the caller's address, honouring proxy headers."""
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def coerce_ad_max_tokens(max_tokens) -> int:
    """Out-of-range or non-numeric values fall back to the default."""
    if isinstance(max_tokens, int) and not isinstance(max_tokens, bool) and 0 < max_tokens <= AD_MAX_TOKENS_CEILING:
        return max_tokens
    return AD_MAX_TOKENS_DEFAULT


def coerce_ad_temperature(temperature) -> float:
    if isinstance(temperature, (int, float)) and not isinstance(temperature, bool) and 0 <= temperature <= 1:
        return float(temperature)
    return AD_TEMPERATURE_DEFAULT


def redact_sensitive_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redact auth-bearing headers before logging.
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and value:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted
