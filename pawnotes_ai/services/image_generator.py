from typing import Callable, Dict, Optional

from ..config import Settings
from ..errors import ConfigurationError, ValidationError
from ..http import HttpRequest
from ..models import ImageRequest, validate_body
from ..secrets import resolve_api_key
from ..upstream import OpenAIClient
from .base import FunctionService


class ImageGeneratorService(FunctionService):
    """image-generator: text prompt in, ``data:image/png;base64,...`` URL out."""

    name = "image-generator"
    unavailable_message = "Image generation service temporarily unavailable"
    failure_message = "Failed to generate image. Please try again."

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[str], OpenAIClient]] = None,
    ):
        super().__init__(settings)
        self.client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> OpenAIClient:
        return OpenAIClient(
            api_key,
            base_url=self.settings.OPENAI_API_BASE,
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
        )

    def process(self, request: HttpRequest) -> Dict[str, str]:
        image_request = validate_body(ImageRequest, request.json())
        prompt = image_request.prompt or ""
        if not prompt.strip():
            raise ValidationError("No prompt provided")
        if len(prompt) > self.settings.MAX_PROMPT_LENGTH:
            raise ValidationError("Prompt too long")

        api_key = resolve_api_key(
            self.settings.OPENAI_IMAGE_API_KEY or self.settings.OPENAI_API_KEY,
            self.settings.OPENAI_SECRET_NAME,
        )
        if not api_key:
            raise ConfigurationError(detail="OpenAI image API key not configured")

        b64 = self.client_factory(api_key).generate_image(
            prompt,
            model=self.settings.IMAGE_MODEL,
            size=self.settings.IMAGE_SIZE,
            quality=self.settings.IMAGE_QUALITY,
        )
        return {"result": f"data:image/png;base64,{b64}"}
