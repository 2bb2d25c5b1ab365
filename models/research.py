"""Value objects for multi-source research."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from models.errors import ValidationError

TOPIC_MIN_CHARS = 2
TOPIC_MAX_CHARS = 100


class SourceId(str, Enum):
    WEB = "web"
    VIDEO = "video"
    NEWS = "news"
    ACADEMIC = "academic"
    ENCYCLOPEDIA = "encyclopedia"

    @classmethod
    def parse(cls, value: Any) -> "SourceId":
        """
        Resolve a client-supplied source tag.

        Accepts the canonical tags plus the legacy names ``youtube`` and
        ``wikipedia``.

        Raises:
            ValidationError: If the tag names no known source
        """
        if isinstance(value, cls):
            return value
        tag = str(value or "").strip().lower()
        tag = _SOURCE_ALIASES.get(tag, tag)
        try:
            return cls(tag)
        except ValueError:
            raise ValidationError(f"Unknown research source: {value!r}", field_name="sources") from None


_SOURCE_ALIASES = {"youtube": "video", "wikipedia": "encyclopedia"}

DEFAULT_SOURCES = (SourceId.WEB, SourceId.VIDEO, SourceId.NEWS)


def sanitize_topic(topic: str) -> str:
    """Strip angle brackets and surrounding whitespace."""
    return topic.replace("<", "").replace(">", "").strip()


def validate_topic(topic: Any) -> str:
    """
    Return the sanitized topic.

    Raises:
        ValidationError: If the topic is missing or, once sanitized, outside
            the allowed length
    """
    if not isinstance(topic, str) or not topic.strip():
        raise ValidationError("Topic is required and must be a string", field_name="topic")

    clean = sanitize_topic(topic)
    if not TOPIC_MIN_CHARS <= len(clean) <= TOPIC_MAX_CHARS:
        raise ValidationError(
            f"Topic must be between {TOPIC_MIN_CHARS} and {TOPIC_MAX_CHARS} characters",
            field_name="topic",
        )
    return clean


@dataclass(frozen=True)
class SearchResult:
    title: str
    source: SourceId
    description: str | None = None
    url: str | None = None
    thumbnail: str | None = None
    date: str | None = None
    author: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title}
        for name in ("description", "url", "thumbnail", "date", "author"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], source: SourceId) -> "SearchResult | None":
        """Rebuild a result from client JSON; returns None when it has no title."""
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            return None

        def _opt(name: str) -> str | None:
            value = payload.get(name)
            return str(value) if value not in (None, "") else None

        return cls(
            title=title.strip(),
            source=source,
            description=_opt("description"),
            url=_opt("url"),
            thumbnail=_opt("thumbnail"),
            date=_opt("date"),
            author=_opt("author"),
        )


@dataclass(frozen=True)
class ResearchQuery:
    topic: str
    sources: tuple[SourceId, ...]

    @classmethod
    def create(cls, topic: Any, sources: Iterable[Any] | None = None) -> "ResearchQuery":
        """
        Validate and normalize a research request.

        Args:
            topic: Raw topic text; angle brackets are removed before the
                length check
            sources: Requested source tags; ``None`` selects the defaults.
                Duplicates collapse onto their first occurrence.

        Raises:
            ValidationError: On a missing/short/long topic, an unknown source
                or an explicitly empty source list
        """
        clean = validate_topic(topic)

        if sources is None:
            resolved: tuple[SourceId, ...] = DEFAULT_SOURCES
        else:
            seen: dict[SourceId, None] = {}
            for value in sources:
                seen.setdefault(SourceId.parse(value), None)
            if not seen:
                raise ValidationError("At least one research source is required", field_name="sources")
            resolved = tuple(seen)

        return cls(topic=clean, sources=resolved)


@dataclass(frozen=True)
class ResearchBundle:
    """
    Per-source research results.

    Every requested source has a key; failed or timed-out sources map to an
    empty tuple.
    """

    results: Mapping[SourceId, tuple[SearchResult, ...]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {source: tuple(items) for source, items in self.results.items()}
        object.__setattr__(self, "results", MappingProxyType(frozen))

    @classmethod
    def for_sources(
        cls,
        sources: Sequence[SourceId],
        found: Mapping[SourceId, Sequence[SearchResult]] | None = None,
    ) -> "ResearchBundle":
        found = found or {}
        return cls({source: tuple(found.get(source) or ()) for source in sources})

    @classmethod
    def from_dict(cls, payload: Any) -> "ResearchBundle":
        """Rebuild a bundle from client JSON, dropping unknown keys and malformed items."""
        if not isinstance(payload, Mapping):
            return cls()

        results: dict[SourceId, list[SearchResult]] = {}
        for key, items in payload.items():
            try:
                source = SourceId.parse(key)
            except ValidationError:
                continue
            bucket = results.setdefault(source, [])
            if not isinstance(items, list):
                continue
            for item in items:
                if isinstance(item, Mapping):
                    result = SearchResult.from_dict(item, source)
                    if result is not None:
                        bucket.append(result)
        return cls(results)

    @property
    def sources(self) -> tuple[SourceId, ...]:
        return tuple(self.results)

    @property
    def total_results(self) -> int:
        return sum(len(items) for items in self.results.values())

    def get(self, source: SourceId) -> tuple[SearchResult, ...]:
        return self.results.get(source, ())

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            source.value: [item.to_dict() for item in items]
            for source, items in self.results.items()
        }
