"""
Models package for research and generation value objects.
"""

from .errors import ContentForgeError, ProviderError, RateLimitExceeded, ValidationError
from .generation import (
    AttemptRecord,
    ContentLength,
    GeneratedText,
    GenerationAttempt,
    GenerationRequest,
    TokenUsage,
)
from .research import ResearchBundle, ResearchQuery, SearchResult, SourceId

__all__ = [
    "AttemptRecord",
    "ContentForgeError",
    "ContentLength",
    "GeneratedText",
    "GenerationAttempt",
    "GenerationRequest",
    "ProviderError",
    "RateLimitExceeded",
    "ResearchBundle",
    "ResearchQuery",
    "SearchResult",
    "SourceId",
    "TokenUsage",
    "ValidationError",
]
