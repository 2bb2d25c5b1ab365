"""Prompt construction for articles, ads and book chapters."""

from models.generation import GenerationRequest
from models.research import ResearchBundle

DIGEST_ITEMS_PER_SOURCE = 3
DIGEST_ITEM_CHARS = 150

LANGUAGE_NAMES = {"ar": "Arabic", "en": "English", "fr": "French", "es": "Spanish", "de": "German"}

ARTICLE_SYSTEM_PROMPT = "You are a professional content writer who grounds every piece in the research provided."
AD_SYSTEM_PROMPT = "You are a smart assistant specialised in writing marketing ads."

BOOK_TYPES = {
    "religious": "Religious",
    "philosophical": "Philosophical",
    "horror": "Horror",
    "scientific": "Scientific",
    "historical": "Historical",
    "literary": "Literary",
    "self_development": "Self-development",
    "romance": "Romance",
    "biography": "Biography",
    "children": "Children",
}

WRITING_STYLES = ["professional", "academic", "creative", "conversational", "formal"]


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.lower(), code)


def _trim_text(text: str, limit: int) -> str:
    raw = " ".join(str(text or "").split())
    if len(raw) <= limit:
        return raw
    return raw[: limit - 3].rstrip() + "..."


def build_research_digest(
    bundle: ResearchBundle,
    max_items_per_source: int = DIGEST_ITEMS_PER_SOURCE,
    max_chars: int = DIGEST_ITEM_CHARS,
) -> str:
    """
    Summarise a bundle into a bounded block of text.

    At most ``max_items_per_source`` items are kept per source, each rendered
    in at most ``max_chars`` characters, so the digest size does not grow
    with the bundle.
    """
    blocks = []
    for source, items in bundle.results.items():
        if not items:
            continue
        lines = [f"{source.value.capitalize()} sources:"]
        for idx, item in enumerate(items[:max_items_per_source], start=1):
            summary = item.title
            if item.description:
                summary = f"{summary}: {item.description}"
            lines.append(f"{idx}. {_trim_text(summary, max_chars)}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_article_prompt(request: GenerationRequest) -> str:
    digest = build_research_digest(request.bundle)
    length = request.length

    parts = [
        f"Write a {request.content_type} about \"{request.topic}\" in {language_name(request.language)}.",
        f"Tone: {request.tone}.",
        f"Target audience: {request.audience}.",
        f"Length: {length.value} ({length.word_target} words).",
    ]
    if digest:
        parts.append(
            "Use the following research findings where relevant and do not invent sources:\n\n" + digest
        )
    else:
        parts.append("No research findings are available; rely on well-established knowledge.")
    parts.append(
        "Structure the piece with a clear introduction, well-organised body sections and a conclusion."
    )
    return "\n\n".join(parts)


def build_ad_prompt(product: str, audience: str, platform: str) -> str:
    return (
        f"Write an engaging, concise and effective marketing ad for the \"{platform}\" platform "
        f"for a product called \"{product}\", aimed at the following audience: {audience}.\n"
        "Match the style of the platform, add a creative touch and end with a clear call to action."
    )


def chapter_system_prompt(book_type: str, author_style: str) -> str:
    return (
        f"You are a professional writer specialised in {BOOK_TYPES.get(book_type, book_type)} books "
        f"with a {author_style} style."
    )


def build_chapter_prompt(
    *,
    book_title: str,
    book_description: str,
    book_type: str,
    language: str,
    chapter_number: int,
    chapter_title: str,
    chapter_description: str,
    total_chapters: int,
    author_style: str,
    research_digest: str = "",
) -> str:
    type_name = BOOK_TYPES.get(book_type, book_type)
    lines = [
        "# Chapter writing task",
        "## Basic information",
        f"- Book type: {type_name}",
        f"- Book title: {book_title}",
        f"- Book description: {book_description}",
        f"- Chapter: {chapter_number} of {total_chapters}",
        f"- Chapter title: {chapter_title}",
        f"- Chapter description: {chapter_description}",
        f"- Writing style: {author_style}",
        "",
        "## Research results",
        research_digest or "No research results provided.",
        "",
        "## Content requirements",
        "- Length: 1500-2000 words",
        "- Structure: introduction (20%), main content (60%), conclusion (20%)",
        f"- Style: {author_style}, appropriate for the {type_name} genre",
        f"- Language: {language_name(language)}",
        "",
        "## Instructions",
        "1. Open with an engaging introduction that shows why the topic matters",
        "2. Reference specific research findings where applicable" if research_digest
        else "2. Focus on comprehensive analysis",
        "3. Keep a logical flow between ideas",
        "4. End with a summary that sets the stage for the next chapter",
    ]
    return "\n".join(lines)
