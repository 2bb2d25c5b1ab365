"""Pydantic request models for FastAPI endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.generation import ContentLength


class CamelModel(BaseModel):
    """Accepts camelCase (wire format) or snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResearchRequest(CamelModel):
    # topic/sources are validated by ResearchQuery.create so the caller gets
    # the same 400 message whatever the failure
    topic: Optional[str] = None
    sources: Optional[List[str]] = None


class GenerateRequest(CamelModel):
    research_data: Optional[dict[str, Any]] = None
    topic: Optional[str] = None
    language: str = Field("en", min_length=2, max_length=10)
    tone: str = Field("professional", min_length=1, max_length=50)
    content_type: str = Field("article", min_length=1, max_length=50)
    length: ContentLength = ContentLength.MEDIUM
    target_audience: str = Field("general readers", min_length=1, max_length=100)


class AdRequest(CamelModel):
    product: Optional[str] = None
    audience: Optional[str] = None
    type: Optional[str] = None
    # Out-of-range values are coerced to defaults rather than rejected
    max_tokens: Any = None
    temperature: Any = None


class ChapterSpec(CamelModel):
    chapter_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)


class BookRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    language: str = Field("en", min_length=2, max_length=10)
    book_type: str = Field(..., min_length=1, max_length=50)
    chapters: List[ChapterSpec] = Field(..., min_length=1, max_length=30)
    include_research: bool = True
    research_sources: List[str] = Field(default_factory=lambda: ["academic", "encyclopedia"])
    author_style: str = Field("professional", min_length=1, max_length=50)
