import logging
from typing import Dict, Optional

from ..config import Settings, settings as default_settings
from ..errors import (
    ConfigurationError,
    InternalError,
    PawNotesAIError,
    UpstreamError,
)
from ..http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class FunctionService:
    """One serverless function: an OPTIONS short-circuit plus ``process``.

    ``handle`` is the error boundary. Whatever ``process`` raises becomes an
    ``{"error": ...}`` envelope; upstream bodies and tracebacks are logged and
    never returned.
    """

    name = "function"
    unavailable_message = "AI service temporarily unavailable"
    failure_message = "Failed to get AI response. Please try again."
    busy_message = "AI service is currently busy. Please try again in a moment."

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def process(self, request: HttpRequest) -> Dict[str, str]:
        raise NotImplementedError

    def handle(self, request: HttpRequest) -> HttpResponse:
        allowed_headers = self.settings.ALLOWED_HEADERS
        if request.method == "OPTIONS":
            return HttpResponse.preflight(allowed_headers)

        try:
            payload = self.process(request)
        except Exception as exc:
            return self.error_response(exc)

        return HttpResponse.json_response(200, payload, allowed_headers)

    def error_response(self, exc: Exception) -> HttpResponse:
        allowed_headers = self.settings.ALLOWED_HEADERS
        if isinstance(exc, PawNotesAIError):
            return HttpResponse.json_response(exc.status_code, {"error": self.public_message(exc)}, allowed_headers)
        logger.exception(f"Error in {self.name} function")
        return HttpResponse.json_response(500, InternalError().to_payload(), allowed_headers)

    def public_message(self, exc: PawNotesAIError) -> str:
        if isinstance(exc, ConfigurationError):
            logger.error(f"{self.name}: {exc.detail or 'API key not configured'}")
            return self.unavailable_message
        if isinstance(exc, UpstreamError):
            logger.error(f"{self.name}: {exc.detail or 'upstream failure'}")
            return self.busy_message if exc.throttled else self.failure_message
        if exc.detail:
            logger.info(f"{self.name}: {exc.message} ({exc.detail})")
        return exc.message
