"""Encyclopedia articles through the MediaWiki search API (no credential required)."""

from urllib.parse import quote

import httpx

from models.research import SearchResult, SourceId

from .base import SourceAdapter, strip_markup


class WikipediaAdapter(SourceAdapter):
    source = SourceId.ENCYCLOPEDIA
    provider_name = "wikipedia"
    requires_credential = False

    def __init__(
        self,
        *,
        language: str = "en",
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(None, timeout_s=timeout_s, client=client)
        self.language = language

    @property
    def base_url(self) -> str:
        return f"https://{self.language}.wikipedia.org"

    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        payload = await self._get_json(
            f"{self.base_url}/w/api.php",
            params={
                "action": "query",
                "list": "search",
                "srsearch": topic,
                "srlimit": max_results,
                "format": "json",
                "utf8": 1,
            },
        )
        hits = (payload.get("query") or {}).get("search") or []

        results = []
        for hit in hits[:max_results]:
            title = hit.get("title")
            if not title:
                continue
            results.append(
                SearchResult(
                    title=title,
                    description=strip_markup(hit.get("snippet")),
                    url=f"{self.base_url}/wiki/{quote(title.replace(' ', '_'))}",
                    date=hit.get("timestamp"),
                    source=self.source,
                )
            )
        return results
