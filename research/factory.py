"""Factory for building the research aggregator from configuration."""

import httpx

from config.config import Config
from models.research import SourceId
from utils.logger import get_logger

from .academic import CrossRefAcademicAdapter
from .aggregator import ResearchAggregator
from .encyclopedia import WikipediaAdapter
from .news import NewsApiAdapter
from .video import YouTubeVideoAdapter
from .web import BraveWebAdapter

logger = get_logger(__name__)


def create_aggregator_from_config(
    config: Config, client: httpx.AsyncClient | None = None
) -> ResearchAggregator:
    """
    Create a ResearchAggregator with one adapter per SourceId.

    Adapters whose credential is missing are still registered; they return
    empty results without making a network call.

    Args:
        config: Loaded application configuration
        client: Optional shared AsyncClient for all adapters

    Returns:
        Configured ResearchAggregator instance
    """
    timeout = config.RESEARCH_TIMEOUT_S
    adapters = {
        SourceId.WEB: BraveWebAdapter(config.BRAVE_SEARCH_API_KEY, timeout_s=timeout, client=client),
        SourceId.VIDEO: YouTubeVideoAdapter(
            config.YOUTUBE_API_KEY,
            brave_api_key=config.BRAVE_SEARCH_API_KEY,
            timeout_s=timeout,
            client=client,
        ),
        SourceId.NEWS: NewsApiAdapter(
            config.NEWS_API_KEY, language=config.RESEARCH_LANGUAGE, timeout_s=timeout, client=client
        ),
        SourceId.ACADEMIC: CrossRefAcademicAdapter(timeout_s=timeout, client=client),
        SourceId.ENCYCLOPEDIA: WikipediaAdapter(
            language=config.RESEARCH_LANGUAGE, timeout_s=timeout, client=client
        ),
    }

    aggregator = ResearchAggregator(
        adapters, timeout_s=timeout, max_results=config.RESEARCH_MAX_RESULTS
    )
    logger.info(
        "Research aggregator created",
        extra={"extra_fields": {"available_sources": aggregator.available_sources()}},
    )
    return aggregator
