from typing import Dict, Optional

from ..config import Settings, settings as default_settings
from .ai_summary import SummaryService
from .base import FunctionService
from .gemini_ai import PromptProxyService
from .image_generator import ImageGeneratorService


def build_services(settings: Optional[Settings] = None) -> Dict[str, FunctionService]:
    """One instance per function name. Keep the result around for the life of
    the process so the summary rate limiter keeps its counts."""
    settings = settings or default_settings
    return {
        PromptProxyService.name: PromptProxyService(settings),
        SummaryService.name: SummaryService(settings),
        ImageGeneratorService.name: ImageGeneratorService(settings),
    }


__all__ = [
    "FunctionService",
    "ImageGeneratorService",
    "PromptProxyService",
    "SummaryService",
    "build_services",
]
