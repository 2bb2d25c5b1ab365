"""Research endpoints: multi-source fan-out and capability status."""

import time

from fastapi import APIRouter, Depends, Request

from config.config import Config, RateLimitScope
from models.research import ResearchQuery
from research.aggregator import ResearchAggregator
from server.dependencies import get_aggregator, get_config, rate_limited
from server.schemas.requests import ResearchRequest
from server.schemas.responses import ResearchMetadataDTO, ResearchResponseDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Research"])


@router.post(
    "/research",
    response_model=ResearchResponseDTO,
    dependencies=[Depends(rate_limited(RateLimitScope.RESEARCH))],
)
async def research(
    request: Request,
    body: ResearchRequest,
    aggregator: ResearchAggregator = Depends(get_aggregator),
):
    """
    Query every requested source concurrently.

    A source that fails or times out contributes an empty list; only input
    validation and admission control produce error responses.
    """
    query = ResearchQuery.create(body.topic, body.sources)

    start = time.monotonic()
    bundle = await aggregator.aggregate(query)
    search_time_ms = int((time.monotonic() - start) * 1000)

    logger.info(
        "Research request served",
        extra={
            "extra_fields": {
                "request_id": getattr(request.state, "request_id", "unknown"),
                "sources": [source.value for source in query.sources],
                "total_results": bundle.total_results,
                "search_time_ms": search_time_ms,
            }
        },
    )

    return ResearchResponseDTO(
        data=bundle.to_dict(),
        metadata=ResearchMetadataDTO(
            total_results=bundle.total_results,
            search_time_ms=search_time_ms,
            sources_used=[source.value for source in query.sources],
        ),
    )


@router.get("/research")
async def research_status(
    aggregator: ResearchAggregator = Depends(get_aggregator),
    config: Config = Depends(get_config),
):
    """Report which sources are configured. No side effects."""
    limit, window_ms = config.rate_limit(RateLimitScope.RESEARCH)
    return {
        "status": "Research API is running",
        "availableSources": aggregator.available_sources(),
        "config": {
            "maxResults": aggregator.max_results,
            "timeoutMs": int(aggregator.timeout_s * 1000),
            "rateLimit": {"limit": limit, "windowMs": window_ms},
        },
    }
