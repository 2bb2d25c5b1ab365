"""Web search through the Brave Search API."""

from models.research import SearchResult, SourceId

from .base import SourceAdapter, strip_markup

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class BraveWebAdapter(SourceAdapter):
    source = SourceId.WEB
    provider_name = "brave"

    async def fetch_raw(self, query: str, count: int) -> list[dict]:
        """Return Brave's raw ``web.results`` list for ``query``."""
        payload = await self._get_json(
            BRAVE_SEARCH_URL,
            params={"q": query, "count": count},
            headers={"X-Subscription-Token": self.api_key or ""},
        )
        web = payload.get("web") or {}
        results = web.get("results") or []
        return [item for item in results if isinstance(item, dict)]

    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        items = await self.fetch_raw(topic, max_results)
        return [
            SearchResult(
                title=strip_markup(item.get("title")) or "Untitled",
                description=strip_markup(item.get("description")),
                url=item.get("url"),
                date=item.get("page_age") or item.get("age"),
                source=self.source,
            )
            for item in items[:max_results]
        ]
