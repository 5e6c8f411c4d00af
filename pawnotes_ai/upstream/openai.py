"""
Client for the OpenAI Chat Completions and Images REST endpoints.
"""
import logging
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import RequestException

from ..errors import UpstreamError
from .base import error_from_response

DEFAULT_API_BASE = "https://api.openai.com/v1"

logger = logging.getLogger(__name__)


class OpenAIClient:
    def __init__(self, api_key: str, base_url: str = DEFAULT_API_BASE, timeout: Optional[float] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = requests.post(
                f"{self.base_url}/{path}",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except RequestException as e:
            raise UpstreamError(detail=f"OpenAI request to {path} failed: {e}") from e

        if not response.ok:
            raise error_from_response("OpenAI", response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(detail=f"OpenAI returned non-JSON body: {response.text[:500]}") from e

    def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str = "gpt-4o-mini",
        max_tokens: int = 150,
        temperature: float = 0.3,
    ) -> str:
        data = self._post(
            "chat/completions",
            {
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            raise UpstreamError(detail=f"Unexpected OpenAI response format: {data}")
        return content.strip()

    def generate_image(
        self,
        prompt: str,
        model: str = "gpt-image-1",
        size: str = "1024x1024",
        quality: Optional[str] = None,
    ) -> str:
        """Generate one image and return it base64-encoded."""
        payload: Dict[str, Any] = {"model": model, "prompt": prompt, "n": 1, "size": size}
        if quality:
            payload["quality"] = quality
        # gpt-image models always answer with b64_json and reject the parameter.
        if model.startswith("dall-e"):
            payload["response_format"] = "b64_json"

        data = self._post("images/generations", payload)
        try:
            b64 = data["data"][0]["b64_json"]
        except (KeyError, IndexError, TypeError):
            b64 = None
        if not b64:
            logger.error(f"Unexpected OpenAI image response keys: {list(data) if isinstance(data, dict) else type(data)}")
            raise UpstreamError(detail="OpenAI image response has no b64_json")
        return b64
