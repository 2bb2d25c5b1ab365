"""Deterministic placeholder documents used when every backend fails."""

from models.generation import GenerationRequest

FALLBACK_MARKER = "[Draft placeholder - automatic generation unavailable]"


def render_article_fallback(request: GenerationRequest) -> str:
    sources = ", ".join(source.value for source, items in request.bundle.results.items() if items)
    return "\n".join(
        [
            FALLBACK_MARKER,
            "",
            f"# {request.topic}",
            "",
            f"Content type: {request.content_type}",
            f"Tone: {request.tone}",
            f"Audience: {request.audience}",
            f"Length: {request.length.value} ({request.length.word_target} words)",
            f"Language: {request.language}",
            f"Research sources with findings: {sources or 'none'}",
            "",
            "## Introduction",
            f"Introduce {request.topic} and why it matters to {request.audience}.",
            "",
            "## Key points",
            f"Cover the main facts and perspectives on {request.topic}.",
            "",
            "## Conclusion",
            "Summarise the takeaways and suggest next steps.",
        ]
    )


def render_ad_fallback(product: str, audience: str, platform: str) -> str:
    return "\n".join(
        [
            FALLBACK_MARKER,
            f"Platform: {platform}",
            f"Discover {product}, made for {audience}.",
            f"Try {product} today!",
        ]
    )


def render_chapter_fallback(chapter_number: int, chapter_title: str, chapter_description: str) -> str:
    return "\n".join(
        [
            FALLBACK_MARKER,
            "",
            f"# Chapter {chapter_number}: {chapter_title}",
            "",
            chapter_description,
        ]
    )
