"""
Client for the Gemini ``generateContent`` REST endpoint.
"""
import logging
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException

from ..errors import UpstreamError
from .base import error_from_response

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}

logger = logging.getLogger(__name__)


def _first_candidate_text(data: Any) -> Optional[str]:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_API_BASE,
        generation_config: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.generation_config = generation_config or dict(DEFAULT_GENERATION_CONFIG)
        self.timeout = timeout

    def generate(self, text: str) -> str:
        """Send one prompt and return the first candidate's text, trimmed.

        Raises UpstreamError on network failures, non-2xx answers and
        responses without candidate text. No retries.
        """
        payload = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": self.generation_config,
        }

        try:
            response = requests.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json=payload,
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except RequestException as e:
            raise UpstreamError(detail=f"Gemini request failed: {e}") from e

        if not response.ok:
            raise error_from_response("Gemini", response)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(detail=f"Gemini returned non-JSON body: {response.text[:500]}") from e

        result = _first_candidate_text(data)
        if not result or not result.strip():
            raise UpstreamError(detail=f"Unexpected Gemini response format: {data}")

        logger.debug(f"Gemini {self.model} returned {len(result)} chars")
        return result.strip()
