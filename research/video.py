"""Video search: YouTube Data API first, Brave ``site:youtube.com`` as top-up."""

from urllib.parse import parse_qs, urlparse

import httpx

from models.research import SearchResult, SourceId
from utils.logger import get_logger

from .base import SourceAdapter, strip_markup
from .web import BraveWebAdapter

logger = get_logger(__name__)

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


def _video_id(url: str) -> str | None:
    """The ``v`` parameter of a youtube.com watch URL, else None."""
    parsed = urlparse(url)
    if not parsed.netloc.endswith("youtube.com") or parsed.path != "/watch":
        return None
    ids = parse_qs(parsed.query).get("v")
    return ids[0] if ids else None


class YouTubeVideoAdapter(SourceAdapter):
    """
    Chains two providers in fixed order.

    The YouTube Data API is tried first. If it yields fewer than
    ``max_results`` videos (or fails), Brave web search restricted to
    youtube.com tops the list up. Each step fails independently.
    """

    source = SourceId.VIDEO
    provider_name = "youtube"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        brave_api_key: str | None = None,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, timeout_s=timeout_s, client=client)
        self._brave = BraveWebAdapter(brave_api_key, timeout_s=timeout_s, client=client)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or self._brave.is_configured

    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        results: list[SearchResult] = []

        if self.api_key:
            try:
                results.extend(await self._search_youtube(topic, max_results))
            except Exception as e:
                logger.info(
                    "YouTube API failed, trying Brave fallback",
                    extra={"extra_fields": {"error": str(e), "error_type": type(e).__name__}},
                )

        if len(results) < max_results and self._brave.is_configured:
            try:
                seen = {result.url for result in results}
                results.extend(await self._search_brave(topic, max_results - len(results), seen))
            except Exception as e:
                logger.info(
                    "Brave video fallback failed",
                    extra={"extra_fields": {"error": str(e), "error_type": type(e).__name__}},
                )

        return results[:max_results]

    async def _search_youtube(self, topic: str, max_results: int) -> list[SearchResult]:
        payload = await self._get_json(
            YOUTUBE_SEARCH_URL,
            params={
                "part": "snippet",
                "q": topic,
                "maxResults": max_results,
                "type": "video",
                "key": self.api_key,
            },
        )

        results = []
        for item in payload.get("items") or []:
            video_id = (item.get("id") or {}).get("videoId")
            snippet = item.get("snippet") or {}
            if not video_id:
                continue
            thumbnail = ((snippet.get("thumbnails") or {}).get("default") or {}).get("url")
            results.append(
                SearchResult(
                    title=strip_markup(snippet.get("title")) or "Untitled",
                    description=strip_markup(snippet.get("description")),
                    url=f"{YOUTUBE_WATCH_URL}{video_id}",
                    thumbnail=thumbnail,
                    date=snippet.get("publishedAt"),
                    author=snippet.get("channelTitle"),
                    source=self.source,
                )
            )
        return results[:max_results]

    async def _search_brave(self, topic: str, wanted: int, seen: set) -> list[SearchResult]:
        """Brave results that link to a video id not already in ``seen``."""
        items = await self._brave.fetch_raw(f"{topic} site:youtube.com", 20)
        seen_ids = {_video_id(url) for url in seen if url}
        videos = []
        for item in items:
            url = str(item.get("url", ""))
            video_id = _video_id(url)
            if video_id and video_id not in seen_ids:
                seen_ids.add(video_id)
                videos.append(item)
        return [
            SearchResult(
                title=strip_markup(item.get("title")) or "Untitled",
                description=strip_markup(item.get("description")),
                url=item.get("url"),
                source=self.source,
            )
            for item in videos[:wanted]
        ]
