"""Text generation backends and the content synthesizer."""

from .base import BaseGenerator
from .factory import create_synthesizer_from_config
from .synthesizer import ContentSynthesizer

__all__ = ["BaseGenerator", "ContentSynthesizer", "create_synthesizer_from_config"]
