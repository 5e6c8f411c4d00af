from .base import error_from_response
from .gemini import GeminiClient
from .openai import OpenAIClient

__all__ = ["GeminiClient", "OpenAIClient", "error_from_response"]
