"""Source adapters against faked provider HTTP APIs (httpx.MockTransport)."""

import asyncio

import httpx
import pytest

from models.research import SourceId
from research.academic import CrossRefAcademicAdapter
from research.encyclopedia import WikipediaAdapter
from research.news import NewsApiAdapter
from research.video import YouTubeVideoAdapter
from research.web import BraveWebAdapter

pytestmark = pytest.mark.unit


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _run(adapter, topic="electric cars", max_results=5):
    return asyncio.run(adapter.search(topic, max_results))


class RecordingHandler:
    """Serves canned JSON by host and records every request."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes[request.url.host]
        return httpx.Response(status, json=body)


def test_missing_credential_makes_no_network_call():
    handler = RecordingHandler({})
    adapter = BraveWebAdapter(None, client=_client(handler))

    assert adapter.is_configured is False
    assert _run(adapter) == []
    assert handler.requests == []


def test_brave_web_results_are_parsed_and_truncated():
    results = [
        {"title": f"<strong>Result</strong> {i}", "description": "desc", "url": f"https://e.com/{i}", "age": "1d"}
        for i in range(8)
    ]
    handler = RecordingHandler({"api.search.brave.com": (200, {"web": {"results": results}})})
    adapter = BraveWebAdapter("brave-key", client=_client(handler))

    found = _run(adapter, max_results=3)

    assert [r.title for r in found] == ["Result 0", "Result 1", "Result 2"]
    assert found[0].source is SourceId.WEB
    assert found[0].date == "1d"
    request = handler.requests[0]
    assert request.headers["X-Subscription-Token"] == "brave-key"
    assert request.url.params["q"] == "electric cars"


def test_http_error_degrades_to_empty_list():
    handler = RecordingHandler({"newsapi.org": (500, {"status": "error"})})
    adapter = NewsApiAdapter("news-key", client=_client(handler))

    assert _run(adapter) == []


def test_news_error_payload_degrades_to_empty_list():
    handler = RecordingHandler(
        {"newsapi.org": (200, {"status": "error", "code": "apiKeyInvalid"})}
    )
    adapter = NewsApiAdapter("news-key", client=_client(handler))

    assert _run(adapter) == []


def test_news_articles_without_title_are_skipped():
    articles = [
        {"title": "EV sales climb", "description": "d", "url": "https://n.com/1",
         "urlToImage": "https://n.com/1.jpg", "publishedAt": "2024-01-01T00:00:00Z", "author": "Kim"},
        {"title": None, "url": "https://n.com/2"},
    ]
    handler = RecordingHandler({"newsapi.org": (200, {"status": "ok", "articles": articles})})
    adapter = NewsApiAdapter("news-key", language="fr", client=_client(handler))

    found = _run(adapter)

    assert len(found) == 1
    assert found[0].thumbnail == "https://n.com/1.jpg"
    assert found[0].author == "Kim"
    assert handler.requests[0].url.params["language"] == "fr"


def test_crossref_needs_no_credential():
    items = [
        {
            "title": ["Battery <i>chemistry</i>"],
            "container-title": ["Energy Journal"],
            "URL": "https://doi.org/10.1/x",
            "created": {"date-time": "2020-05-01T00:00:00Z"},
            "author": [{"given": "Ada", "family": "Lovelace"}, {"family": "Babbage"}],
        },
        {"title": [], "abstract": "<jats:p>Abstract text</jats:p>"},
    ]
    handler = RecordingHandler({"api.crossref.org": (200, {"message": {"items": items}})})
    adapter = CrossRefAcademicAdapter(client=_client(handler))

    found = _run(adapter)

    assert adapter.is_configured
    assert found[0].title == "Battery chemistry"
    assert found[0].description == "Published in: Energy Journal"
    assert found[0].author == "Ada Lovelace, Babbage"
    assert found[1].title == "No title"
    assert found[1].description == "Abstract text"


def test_crossref_blank_or_markup_only_title_becomes_no_title():
    items = [{"title": [""]}, {"title": ["<i></i>"]}]
    handler = RecordingHandler({"api.crossref.org": (200, {"message": {"items": items}})})
    adapter = CrossRefAcademicAdapter(client=_client(handler))

    found = _run(adapter)

    assert [r.title for r in found] == ["No title", "No title"]
    assert all(r.to_dict()["title"] == "No title" for r in found)


def test_wikipedia_builds_article_urls():
    hits = [{"title": "Electric car", "snippet": "An <span>electric</span> car", "timestamp": "t"}]
    handler = RecordingHandler({"en.wikipedia.org": (200, {"query": {"search": hits}})})
    adapter = WikipediaAdapter(client=_client(handler))

    found = _run(adapter)

    assert found[0].url == "https://en.wikipedia.org/wiki/Electric_car"
    assert found[0].description == "An electric car"
    assert found[0].source is SourceId.ENCYCLOPEDIA


def test_video_tops_up_from_brave_when_youtube_is_short():
    youtube = {
        "items": [
            {
                "id": {"videoId": "abc"},
                "snippet": {
                    "title": "EV review",
                    "channelTitle": "Cars",
                    "publishedAt": "2024",
                    "thumbnails": {"default": {"url": "https://i.ytimg.com/abc.jpg"}},
                },
            }
        ]
    }
    brave = {
        "web": {
            "results": [
                {"title": "Not a video", "url": "https://youtube.com/channel/x"},
                {"title": "Brave video", "url": "https://www.youtube.com/watch?v=def"},
            ]
        }
    }
    handler = RecordingHandler(
        {"www.googleapis.com": (200, youtube), "api.search.brave.com": (200, brave)}
    )
    adapter = YouTubeVideoAdapter("yt-key", brave_api_key="brave-key", client=_client(handler))

    found = _run(adapter, max_results=3)

    assert [r.url for r in found] == [
        "https://www.youtube.com/watch?v=abc",
        "https://www.youtube.com/watch?v=def",
    ]
    assert found[0].author == "Cars"
    assert "site:youtube.com" in handler.requests[1].url.params["q"]


def test_video_falls_back_to_brave_when_youtube_fails():
    brave = {"web": {"results": [{"title": "V", "url": "https://www.youtube.com/watch?v=1"}]}}
    handler = RecordingHandler(
        {"www.googleapis.com": (403, {"error": "quota"}), "api.search.brave.com": (200, brave)}
    )
    adapter = YouTubeVideoAdapter("yt-key", brave_api_key="brave-key", client=_client(handler))

    found = _run(adapter)

    assert [r.title for r in found] == ["V"]


def test_video_without_any_credential_is_unconfigured():
    handler = RecordingHandler({})
    adapter = YouTubeVideoAdapter(None, brave_api_key=None, client=_client(handler))

    assert adapter.is_configured is False
    assert _run(adapter) == []
    assert handler.requests == []


def test_video_brave_top_up_skips_videos_youtube_already_returned():
    youtube = {"items": [{"id": {"videoId": "abc"}, "snippet": {"title": "EV review"}}]}
    brave = {
        "web": {
            "results": [
                {"title": "Same video", "url": "https://www.youtube.com/watch?v=abc"},
                {"title": "Other video", "url": "https://www.youtube.com/watch?v=xyz&t=10"},
                {"title": "Other again", "url": "https://m.youtube.com/watch?v=xyz"},
            ]
        }
    }
    handler = RecordingHandler(
        {"www.googleapis.com": (200, youtube), "api.search.brave.com": (200, brave)}
    )
    adapter = YouTubeVideoAdapter("yt-key", brave_api_key="brave-key", client=_client(handler))

    found = _run(adapter, max_results=5)

    urls = [r.url for r in found]
    assert len(urls) == len(set(urls))
    assert urls == [
        "https://www.youtube.com/watch?v=abc",
        "https://www.youtube.com/watch?v=xyz&t=10",
    ]
