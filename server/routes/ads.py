"""Ad copy generation endpoints."""

from fastapi import APIRouter, Depends, Request

from config.config import RateLimitScope
from generation.fallback import render_ad_fallback
from generation.prompts import AD_SYSTEM_PROMPT, build_ad_prompt
from generation.synthesizer import ContentSynthesizer
from models.errors import ValidationError
from server.database import HistoryStore
from server.dependencies import get_history_store, get_synthesizer, rate_limited
from server.schemas.requests import AdRequest
from server.schemas.responses import AdResponseDTO
from server.utils import (
    AD_MAX_TOKENS_CEILING,
    AD_MAX_TOKENS_DEFAULT,
    AD_TEMPERATURE_DEFAULT,
    coerce_ad_max_tokens,
    coerce_ad_temperature,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Ads"])


def _require_text(value: str | None, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field_name=field_name)
    return value.strip()


@router.post(
    "/generate-ad",
    response_model=AdResponseDTO,
    dependencies=[Depends(rate_limited(RateLimitScope.AD))],
)
async def generate_ad(
    request: Request,
    body: AdRequest,
    synthesizer: ContentSynthesizer = Depends(get_synthesizer),
    history: HistoryStore | None = Depends(get_history_store),
):
    product = _require_text(body.product, "product")
    audience = _require_text(body.audience, "audience")
    platform = _require_text(body.type, "type")

    generated = await synthesizer.complete(
        build_ad_prompt(product, audience, platform),
        max_tokens=coerce_ad_max_tokens(body.max_tokens),
        fallback_text=render_ad_fallback(product, audience, platform),
        system_prompt=AD_SYSTEM_PROMPT,
        temperature=coerce_ad_temperature(body.temperature),
    )

    logger.info(
        "Ad generated",
        extra={
            "extra_fields": {
                "request_id": getattr(request.state, "request_id", "unknown"),
                "provider": generated.provider,
                "fallback_used": generated.is_fallback,
            }
        },
    )

    if history is not None:
        history.record_generation("ad", product, generated)

    return AdResponseDTO(
        ad_text=generated.text,
        provider=generated.provider,
        model=generated.model,
        tokens=generated.token_usage.total_tokens,
        fallback_used=generated.is_fallback,
    )


@router.get("/generate-ad")
async def generate_ad_status(synthesizer: ContentSynthesizer = Depends(get_synthesizer)):
    return {
        "status": "Ad generation API is running",
        "availableAPIs": synthesizer.available_backends(),
        "config": {
            "maxTokensDefault": AD_MAX_TOKENS_DEFAULT,
            "maxTokensCeiling": AD_MAX_TOKENS_CEILING,
            "temperatureDefault": AD_TEMPERATURE_DEFAULT,
        },
    }
