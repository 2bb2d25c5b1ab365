"""Factory for building the backend chain from configuration."""

from config.config import Config
from utils.logger import get_logger

from .base import BaseGenerator
from .openai_compatible import (
    DeepSeekGenerator,
    GroqGenerator,
    OpenAICompatibleGenerator,
    OpenAIGenerator,
)
from .synthesizer import ContentSynthesizer

logger = get_logger(__name__)

GENERATOR_CLASSES: dict[str, type[OpenAICompatibleGenerator]] = {
    "openai": OpenAIGenerator,
    "groq": GroqGenerator,
    "deepseek": DeepSeekGenerator,
}


def create_generators(config: Config) -> list[BaseGenerator]:
    """
    Build one backend per name in GENERATION_BACKENDS, keeping that order.

    Unknown names are logged and ignored.
    """
    credentials = config.backend_credentials()
    models = {
        "openai": config.OPENAI_MODEL,
        "groq": config.GROQ_MODEL,
        "deepseek": config.DEEPSEEK_MODEL,
    }

    generators: list[BaseGenerator] = []
    for name in config.GENERATION_BACKENDS:
        generator_cls = GENERATOR_CLASSES.get(name)
        if generator_cls is None:
            logger.warning(f"Unknown generation backend '{name}' ignored")
            continue
        generators.append(
            generator_cls(
                api_key=credentials.get(name),
                model_name=models.get(name),
                timeout_s=config.GENERATION_TIMEOUT_S,
            )
        )
    return generators


def create_synthesizer_from_config(config: Config) -> ContentSynthesizer:
    synthesizer = ContentSynthesizer(
        create_generators(config),
        timeout_s=config.GENERATION_TIMEOUT_S,
        temperature=config.GENERATION_TEMPERATURE,
    )
    logger.info(
        "Content synthesizer created",
        extra={
            "extra_fields": {
                "backend_order": synthesizer.backend_order(),
                "available_backends": synthesizer.available_backends(),
            }
        },
    )
    return synthesizer
