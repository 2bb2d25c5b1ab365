"""
ResearchAggregator - concurrent fan-out to source adapters.

One task per requested source runs inside an ``asyncio.TaskGroup``; each task
races its adapter against a dedicated timeout and converts any failure into
an empty result, so the group always joins cleanly and the bundle always
carries every requested source.
"""

import asyncio
import time
from collections.abc import Mapping

from models.research import ResearchBundle, ResearchQuery, SearchResult, SourceId
from utils.logger import get_logger

from .base import SourceAdapter

logger = get_logger(__name__)


class ResearchAggregator:
    """
    Example usage:
        aggregator = ResearchAggregator({SourceId.WEB: web, SourceId.NEWS: news})
        bundle = await aggregator.aggregate(ResearchQuery.create("electric cars", ["web", "news"]))
        print(bundle.total_results)
    """

    def __init__(
        self,
        adapters: Mapping[SourceId, SourceAdapter],
        timeout_s: float = 10.0,
        max_results: int = 5,
    ):
        """
        Args:
            adapters: One adapter per source; sources without one yield empty results
            timeout_s: Per-adapter timeout in seconds
            max_results: Result cap handed to every adapter
        """
        self.adapters = dict(adapters)
        self.timeout_s = timeout_s
        self.max_results = max_results

    def available_sources(self) -> dict[str, bool]:
        """Report which sources can currently return results."""
        return {
            source.value: bool(self.adapters.get(source) and self.adapters[source].is_configured)
            for source in SourceId
        }

    async def aggregate(self, query: ResearchQuery) -> ResearchBundle:
        """
        Search every requested source concurrently.

        Adapters start in request order; results are collected by source key,
        never by completion order. No retries.

        Returns:
            ResearchBundle with exactly one entry per requested source
        """
        start = time.monotonic()

        async with asyncio.TaskGroup() as group:
            tasks = {
                source: group.create_task(self._search_source(source, query.topic))
                for source in query.sources
            }

        bundle = ResearchBundle.for_sources(
            query.sources, {source: task.result() for source, task in tasks.items()}
        )

        logger.info(
            f"Research complete: {bundle.total_results} results from {len(query.sources)} sources",
            extra={
                "extra_fields": {
                    "sources": [source.value for source in query.sources],
                    "counts": {source.value: len(items) for source, items in bundle.results.items()},
                    "latency_ms": int((time.monotonic() - start) * 1000),
                }
            },
        )
        return bundle

    async def _search_source(self, source: SourceId, topic: str) -> list[SearchResult]:
        """Run one adapter under the timeout; never raises."""
        adapter = self.adapters.get(source)
        if adapter is None:
            logger.warning(
                f"No adapter registered for source {source.value}",
                extra={"extra_fields": {"source": source.value}},
            )
            return []

        try:
            results = await asyncio.wait_for(
                adapter.search(topic, self.max_results), timeout=self.timeout_s
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Timeout for source {source.value}",
                extra={"extra_fields": {"source": source.value, "timeout_s": self.timeout_s}},
            )
            return []
        except Exception as e:
            logger.error(
                f"Unexpected error for source {source.value}: {e}",
                extra={
                    "extra_fields": {
                        "source": source.value,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
            )
            return []

        return list(results or [])[: self.max_results]
