"""Multi-source research for ContentForge."""

from .aggregator import ResearchAggregator
from .base import SourceAdapter
from .factory import create_aggregator_from_config

__all__ = ["ResearchAggregator", "SourceAdapter", "create_aggregator_from_config"]
