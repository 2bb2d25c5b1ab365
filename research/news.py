"""News articles through NewsAPI."""

import httpx

from models.research import SearchResult, SourceId

from .base import SourceAdapter, strip_markup

NEWS_API_URL = "https://newsapi.org/v2/everything"


class NewsApiAdapter(SourceAdapter):
    source = SourceId.NEWS
    provider_name = "newsapi"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        language: str = "en",
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, timeout_s=timeout_s, client=client)
        self.language = language

    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        payload = await self._get_json(
            NEWS_API_URL,
            params={"q": topic, "language": self.language, "pageSize": max_results},
            headers={"X-Api-Key": self.api_key or ""},
        )
        if payload.get("status") == "error":
            raise ValueError(f"NewsAPI error: {payload.get('code') or payload.get('message')}")

        results = []
        for article in payload.get("articles") or []:
            title = strip_markup(article.get("title"))
            if not title:
                continue
            results.append(
                SearchResult(
                    title=title,
                    description=strip_markup(article.get("description")),
                    url=article.get("url"),
                    thumbnail=article.get("urlToImage"),
                    date=article.get("publishedAt"),
                    author=article.get("author"),
                    source=self.source,
                )
            )
        return results[:max_results]
