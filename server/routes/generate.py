"""Content generation endpoints."""

from fastapi import APIRouter, Depends, Request

from config.config import RateLimitScope
from generation.synthesizer import ContentSynthesizer
from models.errors import ValidationError
from models.generation import ContentLength, GenerationRequest
from models.research import ResearchBundle, validate_topic
from server.database import HistoryStore
from server.dependencies import get_history_store, get_synthesizer, rate_limited
from server.schemas.requests import GenerateRequest
from server.schemas.responses import GenerateResponseDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Generate"])


@router.post(
    "/generate",
    response_model=GenerateResponseDTO,
    dependencies=[Depends(rate_limited(RateLimitScope.GENERATE))],
)
async def generate(
    request: Request,
    body: GenerateRequest,
    synthesizer: ContentSynthesizer = Depends(get_synthesizer),
    history: HistoryStore | None = Depends(get_history_store),
):
    """Write a document grounded in previously gathered research."""
    if body.research_data is None:
        raise ValidationError("researchData is required", field_name="researchData")
    topic = validate_topic(body.topic)

    gen_request = GenerationRequest(
        bundle=ResearchBundle.from_dict(body.research_data),
        topic=topic,
        language=body.language,
        tone=body.tone,
        content_type=body.content_type,
        length=body.length,
        audience=body.target_audience,
    )

    generated = await synthesizer.synthesize(gen_request)

    logger.info(
        "Content generated",
        extra={
            "extra_fields": {
                "request_id": getattr(request.state, "request_id", "unknown"),
                "provider": generated.provider,
                "fallback_used": generated.is_fallback,
                "attempts": len(generated.attempts),
                "latency_ms": generated.latency_ms,
            }
        },
    )

    if history is not None:
        history.record_generation("article", topic, generated)

    return GenerateResponseDTO.from_generated(generated, gen_request)


@router.get("/generate")
async def generate_status(synthesizer: ContentSynthesizer = Depends(get_synthesizer)):
    """Report which generation backends are configured. No side effects."""
    return {
        "status": "Content generation API is running",
        "availableAPIs": synthesizer.available_backends(),
        "config": {
            "backendOrder": synthesizer.backend_order(),
            "timeoutMs": int(synthesizer.timeout_s * 1000),
            "lengths": {length.value: length.max_tokens for length in ContentLength},
        },
    }
