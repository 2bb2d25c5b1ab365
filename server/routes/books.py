"""Book chapter generation endpoints."""

import asyncio

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from config.config import Config, RateLimitScope
from generation.fallback import render_chapter_fallback
from generation.prompts import (
    BOOK_TYPES,
    WRITING_STYLES,
    build_chapter_prompt,
    build_research_digest,
    chapter_system_prompt,
)
from generation.synthesizer import ContentSynthesizer
from models.errors import ValidationError
from models.research import TOPIC_MAX_CHARS, ResearchBundle, ResearchQuery
from research.aggregator import ResearchAggregator
from server.database import HistoryStore
from server.dependencies import (
    get_aggregator,
    get_api_key,
    get_config,
    get_history_store,
    get_synthesizer,
    rate_limited,
)
from server.schemas.requests import BookRequest
from server.schemas.responses import BookInfoDTO, BookResponseDTO, GeneratedChapterDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Books"])


async def _gather_book_research(
    aggregator: ResearchAggregator, body: BookRequest, request_id: str
) -> ResearchBundle | None:
    """Run one research pass on the book title; a bad title just skips research."""
    try:
        query = ResearchQuery.create(body.title[:TOPIC_MAX_CHARS], body.research_sources)
    except ValidationError as e:
        logger.warning(
            f"Skipping book research: {e.message}",
            extra={"extra_fields": {"request_id": request_id, "field": e.field_name}},
        )
        return None
    return await aggregator.aggregate(query)


async def _write_chapters(
    body: BookRequest,
    synthesizer: ContentSynthesizer,
    config: Config,
    digest: str,
    history: HistoryStore | None,
) -> list[GeneratedChapterDTO]:
    chapters: list[GeneratedChapterDTO] = []
    system_prompt = chapter_system_prompt(body.book_type, body.author_style)
    total = len(body.chapters)

    for index, chapter in enumerate(body.chapters):
        if index > 0 and config.BOOK_CHAPTER_DELAY_S > 0:
            await asyncio.sleep(config.BOOK_CHAPTER_DELAY_S)

        prompt = build_chapter_prompt(
            book_title=body.title,
            book_description=body.description,
            book_type=body.book_type,
            language=body.language,
            chapter_number=chapter.chapter_number,
            chapter_title=chapter.title,
            chapter_description=chapter.description,
            total_chapters=total,
            author_style=body.author_style,
            research_digest=digest,
        )
        generated = await synthesizer.complete(
            prompt,
            max_tokens=config.BOOK_CHAPTER_MAX_TOKENS,
            fallback_text=render_chapter_fallback(
                chapter.chapter_number, chapter.title, chapter.description
            ),
            system_prompt=system_prompt,
        )
        if history is not None:
            history.record_generation("chapter", f"{body.title}: {chapter.title}", generated)

        chapters.append(
            GeneratedChapterDTO(
                chapter_number=chapter.chapter_number,
                title=chapter.title,
                description=chapter.description,
                content=generated.text,
                provider=generated.provider,
                fallback_used=generated.is_fallback,
                tokens=generated.token_usage.total_tokens,
            )
        )
    return chapters


@router.post(
    "/books/generate",
    response_model=BookResponseDTO,
    dependencies=[Depends(get_api_key), Depends(rate_limited(RateLimitScope.BOOK))],
)
async def generate_book(
    request: Request,
    body: BookRequest,
    config: Config = Depends(get_config),
    aggregator: ResearchAggregator = Depends(get_aggregator),
    synthesizer: ContentSynthesizer = Depends(get_synthesizer),
    history: HistoryStore | None = Depends(get_history_store),
):
    """
    Generate the requested chapters one after another.

    Research (when requested) runs once on the book title and its digest is
    shared by every chapter prompt. The whole request is bounded by
    BOOK_TIMEOUT_S; on expiry the client gets 408 and no partial book.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    bundle: ResearchBundle | None = None

    try:
        async with asyncio.timeout(config.BOOK_TIMEOUT_S):
            if body.include_research:
                bundle = await _gather_book_research(aggregator, body, request_id)
            digest = build_research_digest(bundle) if bundle is not None else ""
            chapters = await _write_chapters(body, synthesizer, config, digest, history)
    except TimeoutError:
        logger.warning(
            "Book generation deadline exceeded",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "timeout_s": config.BOOK_TIMEOUT_S,
                    "chapters": len(body.chapters),
                }
            },
        )
        return JSONResponse(
            status_code=status.HTTP_408_REQUEST_TIMEOUT,
            content={
                "success": False,
                "error": "Book generation timed out, try fewer chapters",
            },
        )

    logger.info(
        "Book generated",
        extra={
            "extra_fields": {
                "request_id": request_id,
                "chapters": len(chapters),
                "fallback_chapters": sum(1 for c in chapters if c.fallback_used),
            }
        },
    )

    return BookResponseDTO(
        book=BookInfoDTO(
            title=body.title,
            description=body.description,
            type=body.book_type,
            language=body.language,
            total_chapters=len(chapters),
        ),
        chapters=chapters,
        research=bundle.to_dict() if bundle is not None else None,
        total_tokens=sum(chapter.tokens for chapter in chapters),
    )


@router.get("/books/generate")
async def book_options(config: Config = Depends(get_config)):
    """List supported book types and writing styles."""
    return {
        "status": "Book generation API is running",
        "bookTypes": BOOK_TYPES,
        "writingStyles": WRITING_STYLES,
        "config": {
            "maxChapters": 30,
            "chapterMaxTokens": config.BOOK_CHAPTER_MAX_TOKENS,
            "timeoutMs": int(config.BOOK_TIMEOUT_S * 1000),
        },
    }
