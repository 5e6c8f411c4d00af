import logging
from typing import Callable, Dict, Optional

from ..config import Settings
from ..errors import ConfigurationError, RateLimitExceeded, ValidationError
from ..http import HttpRequest
from ..models import SummaryRequest, validate_body
from ..rate_limit import RateLimiter, build_rate_limiter
from ..secrets import resolve_api_key
from ..upstream import OpenAIClient
from .base import FunctionService

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise, meaningful summaries of notes. "
    "Provide a summary in 1-3 sentences that captures the main points and key information. "
    "Be accurate and avoid hallucination."
)


class SummaryService(FunctionService):
    """ai-summary: throttled, validated note summary through OpenAI."""

    name = "ai-summary"
    unavailable_message = "AI summary service temporarily unavailable"
    failure_message = "Failed to generate summary. Please try again."

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rate_limiter: Optional[RateLimiter] = None,
        client_factory: Optional[Callable[[str], OpenAIClient]] = None,
    ):
        super().__init__(settings)
        self.rate_limiter = rate_limiter or build_rate_limiter(self.settings)
        self.client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> OpenAIClient:
        return OpenAIClient(
            api_key,
            base_url=self.settings.OPENAI_API_BASE,
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
        )

    def validate(self, summary_request: SummaryRequest) -> None:
        if not summary_request.content and not summary_request.title:
            raise ValidationError("No content provided to summarize")
        if len(summary_request.content) > self.settings.SUMMARY_MAX_CONTENT_LENGTH:
            raise ValidationError("Content too long for summarization")
        if len(summary_request.title) > self.settings.SUMMARY_MAX_TITLE_LENGTH:
            raise ValidationError("Title too long")

    def process(self, request: HttpRequest) -> Dict[str, str]:
        client_id = request.client_key
        if not self.rate_limiter.allow(client_id):
            logger.warning(f"Rate limit exceeded for client {client_id}")
            raise RateLimitExceeded()

        summary_request = validate_body(SummaryRequest, request.json())
        self.validate(summary_request)

        api_key = resolve_api_key(self.settings.OPENAI_API_KEY, self.settings.OPENAI_SECRET_NAME)
        if not api_key:
            raise ConfigurationError(detail="OpenAI API key not configured")

        summary = self.client_factory(api_key).chat_completion(
            [
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": f"Please summarize this note:\n\n{summary_request.text_to_summarize()}"},
            ],
            model=self.settings.SUMMARY_MODEL,
            max_tokens=self.settings.SUMMARY_MAX_TOKENS,
            temperature=self.settings.SUMMARY_TEMPERATURE,
        )
        return {"result": summary}
