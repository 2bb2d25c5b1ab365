import re
from abc import ABC, abstractmethod
from typing import Any

import httpx

from models.research import SearchResult, SourceId
from utils.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = "ContentForge-Research/1.0"
_TAG_RE = re.compile(r"<[^>]+>")


def strip_markup(text: Any) -> str | None:
    """Remove inline HTML/JATS tags that providers embed in snippets."""
    if text is None:
        return None
    cleaned = _TAG_RE.sub("", str(text)).strip()
    return cleaned or None


class SourceAdapter(ABC):
    """
    Abstract base class for research source adapters.

    An adapter owns one provider: it builds the provider request, maps the
    credential from configuration, parses the response into SearchResult
    objects and truncates to ``max_results``.

    IMPORTANT: ``search`` never raises. Missing credentials, HTTP errors and
    malformed payloads all degrade to an empty list, with the cause logged.
    """

    source: SourceId
    provider_name: str = "unknown"
    requires_credential: bool = True

    def __init__(
        self,
        api_key: str | None = None,
        *,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            api_key: Provider credential, when the provider needs one
            timeout_s: Transport timeout for each provider request
            client: Shared AsyncClient; a short-lived one is opened per
                request when omitted
        """
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or not self.requires_credential

    async def search(self, topic: str, max_results: int) -> list[SearchResult]:
        """
        Search the provider for ``topic``.

        Returns:
            Up to ``max_results`` results in provider order; empty on any failure
        """
        if not self.is_configured:
            logger.warning(
                f"{self.provider_name} credential not configured; skipping {self.source.value} search",
                extra={"extra_fields": {"source": self.source.value, "provider": self.provider_name}},
            )
            return []

        try:
            results = await self._search(topic, max_results)
        except Exception as e:
            logger.warning(
                f"{self.provider_name} search failed: {e}",
                extra={
                    "extra_fields": {
                        "source": self.source.value,
                        "provider": self.provider_name,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
            )
            return []

        return results[:max_results]

    @abstractmethod
    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        """Provider-specific request and parsing; may raise."""

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GET a JSON object, raising on non-2xx status or a non-object body."""
        request_headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        request_headers.update(headers or {})

        if self._client is not None:
            response = await self._client.get(
                url, params=params, headers=request_headers, timeout=self.timeout_s
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.get(url, params=params, headers=request_headers)

        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected {self.provider_name} payload type: {type(payload).__name__}")
        return payload
