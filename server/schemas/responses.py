"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.generation import GeneratedText, GenerationRequest


class CamelDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResearchMetadataDTO(CamelDTO):
    total_results: int
    search_time_ms: int
    sources_used: list[str]


class ResearchResponseDTO(CamelDTO):
    success: bool = True
    data: dict[str, list[dict[str, Any]]]
    metadata: ResearchMetadataDTO


class GenerationMetadataDTO(CamelDTO):
    provider: str
    model: str
    fallback_used: bool
    attempts: list[dict[str, Any]] = Field(default_factory=list)
    latency_ms: int
    tokens: int
    topic: str
    language: str
    tone: str
    content_type: str
    length: str
    max_tokens: int
    target_audience: str
    research_items: int
    timestamp: str


class GenerateResponseDTO(CamelDTO):
    success: bool = True
    content: str
    metadata: GenerationMetadataDTO

    @classmethod
    def from_generated(cls, generated: GeneratedText, request: GenerationRequest):
        """Convert GeneratedText plus its request to DTO."""
        return cls(
            content=generated.text,
            metadata=GenerationMetadataDTO(
                provider=generated.provider,
                model=generated.model,
                fallback_used=generated.is_fallback,
                attempts=[record.to_dict() for record in generated.attempts],
                latency_ms=generated.latency_ms,
                tokens=generated.token_usage.total_tokens,
                topic=request.topic,
                language=request.language,
                tone=request.tone,
                content_type=request.content_type,
                length=request.length.value,
                max_tokens=request.length.max_tokens,
                target_audience=request.audience,
                research_items=request.bundle.total_results,
                timestamp=generated.timestamp,
            ),
        )


class AdResponseDTO(CamelDTO):
    success: bool = True
    ad_text: str
    provider: str
    model: str
    tokens: int
    fallback_used: bool


class BookInfoDTO(CamelDTO):
    title: str
    description: str
    type: str
    language: str
    total_chapters: int


class GeneratedChapterDTO(CamelDTO):
    chapter_number: int
    title: str
    description: str
    content: str
    provider: str
    fallback_used: bool
    tokens: int


class BookResponseDTO(CamelDTO):
    success: bool = True
    book: BookInfoDTO
    chapters: list[GeneratedChapterDTO]
    research: dict[str, list[dict[str, Any]]] | None = None
    total_tokens: int


class HistoryEntryDTO(BaseModel):
    id: int
    timestamp: str
    kind: str
    topic: str
    provider: str
    model: str
    content: str
    is_fallback: bool
    latency_ms: int | None = None
    tokens: int | None = None


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
