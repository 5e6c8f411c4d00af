import logging
from typing import Callable, Dict, Optional

from ..config import Settings
from ..errors import ConfigurationError, ValidationError
from ..http import HttpRequest
from ..models import PromptRequest, validate_body
from ..prompts import compose_prompt, get_mode
from ..secrets import resolve_api_key
from ..upstream import GeminiClient
from .base import FunctionService

logger = logging.getLogger(__name__)


class PromptProxyService(FunctionService):
    """gemini-ai: pick a mode template, forward to Gemini, return ``{"result"}``."""

    name = "gemini-ai"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[str], GeminiClient]] = None,
    ):
        super().__init__(settings)
        self.client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> GeminiClient:
        return GeminiClient(
            api_key,
            model=self.settings.GEMINI_MODEL,
            base_url=self.settings.GEMINI_API_BASE,
            generation_config=self.settings.generation_config(),
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
        )

    def build_prompt(self, prompt_request: PromptRequest) -> str:
        """Validate the request and return the text sent upstream."""
        mode = get_mode(prompt_request.action)
        options = mode.parse_options(prompt_request.mode_options())

        prompt = prompt_request.text
        if len(prompt) > self.settings.MAX_PROMPT_LENGTH:
            raise ValidationError("Prompt too long")
        if mode.requires_prompt and not prompt.strip():
            raise ValidationError("No prompt provided")

        logger.info(f"gemini-ai request: mode={mode.name} prompt_chars={len(prompt)}")
        return compose_prompt(mode.system_instruction(options), prompt)

    def process(self, request: HttpRequest) -> Dict[str, str]:
        prompt_request = validate_body(PromptRequest, request.json())
        text = self.build_prompt(prompt_request)

        api_key = resolve_api_key(self.settings.GEMINI_API_KEY, self.settings.GEMINI_SECRET_NAME)
        if not api_key:
            raise ConfigurationError(detail="Gemini API key not configured")

        result = self.client_factory(api_key).generate(text)
        return {"result": result}
