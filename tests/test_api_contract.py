"""
HTTP contract tests for the FastAPI layer.

The app is built with in-memory collaborators: source adapters and generation
backends are fakes, so no test touches the network or spends tokens.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from config.config import Config
from generation.base import BaseGenerator
from generation.synthesizer import ContentSynthesizer
from models.errors import ProviderError
from models.generation import GenerationAttempt, TokenUsage
from models.research import SearchResult, SourceId
from research.aggregator import ResearchAggregator
from research.base import SourceAdapter
from server.app import create_app
from server.database import HistoryStore

pytestmark = pytest.mark.integration

API_KEY = "test-key"


class StaticAdapter(SourceAdapter):
    requires_credential = False

    def __init__(self, source: SourceId, count: int = 0, fail: bool = False):
        super().__init__()
        self.source = source
        self.count = count
        self.fail = fail

    async def _search(self, topic, max_results):
        if self.fail:
            raise ConnectionError("provider down")
        return [
            SearchResult(title=f"{topic} {self.source.value} {i}", source=self.source, url=f"https://x/{i}")
            for i in range(self.count)
        ]


class StaticGenerator(BaseGenerator):
    def __init__(self, name: str, text: str = "", fail: bool = False, delay: float = 0.0):
        super().__init__("key", f"{name}-model")
        self.provider_name = name
        self.text = text
        self.fail = fail
        self.delay = delay
        self.prompts: list[str] = []

    async def attempt(self, prompt, *, max_tokens, system_prompt=None, temperature=0.7):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            return self._create_error_attempt(
                request_id="r",
                error=ProviderError(code="provider_error", message="down", provider=self.provider_name),
                latency_ms=1,
            )
        return GenerationAttempt(
            request_id="r",
            provider=self.provider_name,
            model=self.model_name,
            latency_ms=3,
            text=self.text,
            token_usage=TokenUsage(prompt_tokens=5, completion_tokens=15),
        )


class ExplodingSynthesizer(ContentSynthesizer):
    async def synthesize(self, request):
        raise RuntimeError("database password is hunter2")


@pytest.fixture()
def config():
    cfg = Config()
    cfg.API_KEYS = [API_KEY]
    cfg.HISTORY_ENABLED = False
    cfg.BOOK_CHAPTER_DELAY_S = 0
    return cfg


@pytest.fixture()
def aggregator():
    return ResearchAggregator(
        {
            SourceId.WEB: StaticAdapter(SourceId.WEB, count=2),
            SourceId.NEWS: StaticAdapter(SourceId.NEWS, fail=True),
            SourceId.ACADEMIC: StaticAdapter(SourceId.ACADEMIC, count=1),
        },
        timeout_s=1.0,
    )


@pytest.fixture()
def generators():
    return [StaticGenerator("openai", fail=True), StaticGenerator("groq", text="A grounded article.")]


def _client(config, aggregator, synthesizer, **kwargs) -> TestClient:
    app = create_app(config, aggregator=aggregator, synthesizer=synthesizer, **kwargs)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def client(config, aggregator, generators):
    return _client(config, aggregator, ContentSynthesizer(generators))


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert r.headers["X-Request-ID"]


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_research_returns_entry_per_source(client):
    r = client.post("/v1/research", json={"topic": "electric cars", "sources": ["web", "news"]})

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert set(body["data"]) == {"web", "news"}
    assert len(body["data"]["web"]) == 2
    assert body["data"]["news"] == []
    assert body["metadata"]["totalResults"] == 2
    assert body["metadata"]["sourcesUsed"] == ["web", "news"]
    assert isinstance(body["metadata"]["searchTimeMs"], int)


def test_research_sanitizes_topic(client):
    r = client.post("/v1/research", json={"topic": "<script>ev</script>", "sources": ["web"]})
    assert r.status_code == 200
    assert "<" not in r.json()["data"]["web"][0]["title"]


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"topic": "a"},
        {"topic": "x" * 101},
        {"topic": "solar", "sources": ["podcasts"]},
        {"topic": "solar", "sources": []},
    ],
)
def test_research_rejects_invalid_input(client, payload):
    r = client.post("/v1/research", json=payload)
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert r.json()["error"]


def test_malformed_body_is_400_with_details(client):
    r = client.post("/v1/research", json={"topic": 123})
    assert r.status_code == 400
    assert r.json()["details"]


def test_research_rate_limit_returns_429_with_retry_after(config, aggregator, generators):
    config.RESEARCH_RATE_LIMIT = 2
    client = _client(config, aggregator, ContentSynthesizer(generators))
    payload = {"topic": "wind power", "sources": ["web"]}

    assert client.post("/v1/research", json=payload).status_code == 200
    assert client.post("/v1/research", json=payload).status_code == 200
    r = client.post("/v1/research", json=payload)

    assert r.status_code == 429
    assert int(r.headers["Retry-After"]) >= 1
    assert r.headers["X-RateLimit-Limit"] == "2"
    assert r.json()["success"] is False


def test_admitted_request_reports_remaining_quota(config, aggregator, generators):
    config.RESEARCH_RATE_LIMIT = 2
    client = _client(config, aggregator, ContentSynthesizer(generators))
    payload = {"topic": "wind power", "sources": ["web"]}

    first = client.post("/v1/research", json=payload)
    second = client.post("/v1/research", json=payload)

    assert first.headers["X-RateLimit-Limit"] == "2"
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert second.headers["X-RateLimit-Remaining"] == "0"


def test_rate_limit_scopes_are_independent(config, aggregator, generators):
    config.RESEARCH_RATE_LIMIT = 1
    client = _client(config, aggregator, ContentSynthesizer(generators))

    client.post("/v1/research", json={"topic": "wind", "sources": ["web"]})
    assert client.post("/v1/research", json={"topic": "wind", "sources": ["web"]}).status_code == 429
    r = client.post("/v1/generate", json={"researchData": {}, "topic": "wind"})
    assert r.status_code == 200


def test_research_status_lists_sources(client):
    r = client.get("/v1/research")
    body = r.json()
    assert r.status_code == 200
    assert body["availableSources"]["web"] is True
    assert body["availableSources"]["video"] is False
    assert body["config"]["maxResults"] == 5


def test_generate_uses_first_working_backend(client, generators):
    research = {"web": [{"title": "EV range doubles", "description": "Battery news"}]}
    r = client.post(
        "/v1/generate",
        json={
            "researchData": research,
            "topic": "electric cars",
            "tone": "casual",
            "contentType": "blog post",
            "length": "short",
            "targetAudience": "commuters",
        },
    )

    assert r.status_code == 200
    body = r.json()
    assert body["content"] == "A grounded article."
    meta = body["metadata"]
    assert meta["provider"] == "groq"
    assert meta["fallbackUsed"] is False
    assert meta["maxTokens"] == 500
    assert meta["researchItems"] == 1
    assert [a["provider"] for a in meta["attempts"]] == ["openai", "groq"]
    assert "EV range doubles" in generators[1].prompts[0]


def test_generate_without_backends_returns_template(config, aggregator):
    client = _client(config, aggregator, ContentSynthesizer([]))

    r = client.post(
        "/v1/generate",
        json={"researchData": {}, "topic": "tidal energy", "tone": "formal", "contentType": "report"},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["metadata"]["fallbackUsed"] is True
    for expected in ("tidal energy", "formal", "report"):
        assert expected in body["content"]


@pytest.mark.parametrize(
    "payload",
    [
        {"topic": "electric cars"},
        {"researchData": {}, "topic": "x"},
        {"researchData": {}, "topic": "cars", "length": "epic"},
    ],
)
def test_generate_rejects_invalid_input(client, payload):
    assert client.post("/v1/generate", json=payload).status_code == 400


def test_generate_internal_failure_is_generic_500(config, aggregator):
    client = _client(config, aggregator, ExplodingSynthesizer([]))

    r = client.post("/v1/generate", json={"researchData": {}, "topic": "electric cars"})

    assert r.status_code == 500
    body = r.json()
    assert body == {"success": False, "error": "Internal server error", "requestId": body["requestId"]}
    assert "hunter2" not in r.text


def test_generate_status_lists_backends(client):
    body = client.get("/v1/generate").json()
    assert body["availableAPIs"] == {"openai": True, "groq": True}
    assert body["config"]["backendOrder"] == ["openai", "groq"]
    assert body["config"]["lengths"] == {"short": 500, "medium": 1000, "long": 2000}


def test_generate_ad(client):
    r = client.post(
        "/v1/generate-ad",
        json={"product": "Glow Lamp", "audience": "students", "type": "instagram", "maxTokens": 9000},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["adText"] == "A grounded article."
    assert body["provider"] == "groq"
    assert body["tokens"] == 20
    assert body["fallbackUsed"] is False


@pytest.mark.parametrize("missing", ["product", "audience", "type"])
def test_generate_ad_requires_fields(client, missing):
    payload = {"product": "Glow Lamp", "audience": "students", "type": "instagram"}
    payload[missing] = "  "
    assert client.post("/v1/generate-ad", json=payload).status_code == 400


def _book_payload(**overrides):
    payload = {
        "title": "Wind and Water",
        "description": "Renewable energy for curious readers",
        "language": "en",
        "bookType": "scientific",
        "chapters": [
            {"chapterNumber": 1, "title": "Wind", "description": "Turbines"},
            {"chapterNumber": 2, "title": "Water", "description": "Hydro"},
        ],
        "includeResearch": True,
        "researchSources": ["academic"],
    }
    payload.update(overrides)
    return payload


def test_book_generation_requires_api_key(client):
    assert client.post("/v1/books/generate", json=_book_payload()).status_code == 401
    r = client.post("/v1/books/generate", json=_book_payload(), headers={"X-API-Key": "wrong"})
    assert r.status_code == 401


def test_book_generation_without_configured_keys_is_500(config, aggregator, generators):
    config.API_KEYS = []
    client = _client(config, aggregator, ContentSynthesizer(generators))
    r = client.post("/v1/books/generate", json=_book_payload(), headers={"X-API-Key": API_KEY})
    assert r.status_code == 500


def test_book_generation_writes_chapters_in_order(client, generators):
    r = client.post("/v1/books/generate", json=_book_payload(), headers={"X-API-Key": API_KEY})

    assert r.status_code == 200
    body = r.json()
    assert body["book"]["totalChapters"] == 2
    assert body["book"]["type"] == "scientific"
    assert [c["chapterNumber"] for c in body["chapters"]] == [1, 2]
    assert body["totalTokens"] == 40
    assert len(body["research"]["academic"]) == 1
    # one research pass; its digest is shared by every chapter prompt
    assert all("Wind and Water academic 0" in p for p in generators[1].prompts)


def test_book_generation_times_out_with_408(config, aggregator):
    config.BOOK_TIMEOUT_S = 0.05
    slow = StaticGenerator("groq", text="late", delay=0.5)
    client = _client(config, aggregator, ContentSynthesizer([slow], timeout_s=5.0))

    r = client.post(
        "/v1/books/generate",
        json=_book_payload(includeResearch=False),
        headers={"X-API-Key": API_KEY},
    )

    assert r.status_code == 408
    assert r.json()["success"] is False


def test_book_chapter_count_is_bounded(client):
    chapters = [{"chapterNumber": i, "title": f"C{i}"} for i in range(1, 32)]
    r = client.post(
        "/v1/books/generate", json=_book_payload(chapters=chapters), headers={"X-API-Key": API_KEY}
    )
    assert r.status_code == 400


def test_book_options_lists_types(client):
    body = client.get("/v1/books/generate").json()
    assert "scientific" in body["bookTypes"]
    assert "academic" in body["writingStyles"]


def test_history_records_generated_content(config, aggregator, generators, tmp_path):
    store = HistoryStore(str(tmp_path / "history.db"))
    store.init_db()
    client = _client(config, aggregator, ContentSynthesizer(generators), history=store)
    headers = {"X-API-Key": API_KEY}

    client.post("/v1/generate", json={"researchData": {}, "topic": "electric cars"})
    client.post("/v1/generate-ad", json={"product": "Lamp", "audience": "all", "type": "x"})

    entries = client.get("/v1/history", headers=headers).json()
    assert [e["kind"] for e in entries] == ["ad", "article"]
    assert entries[1]["topic"] == "electric cars"

    articles = client.get("/v1/history", params={"kind": "article"}, headers=headers).json()
    assert len(articles) == 1

    assert client.delete(f"/v1/history/{articles[0]['id']}", headers=headers).status_code == 204
    assert client.delete(f"/v1/history/{articles[0]['id']}", headers=headers).status_code == 404
    assert client.delete("/v1/history", headers=headers).status_code == 204
    assert client.get("/v1/history", headers=headers).json() == []


def test_history_requires_api_key(client):
    assert client.get("/v1/history").status_code == 401
