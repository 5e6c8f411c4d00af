"""Error taxonomy shared by every function.

Each error carries the HTTP status it maps to and a public ``message`` that is
safe to return to the browser. ``detail`` is for server-side logs only and
must never be copied into a response body.
"""

from typing import Dict, Optional


class PawNotesAIError(Exception):
    status_code = 500
    message = "Internal server error. Please try again later."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.message}


class ValidationError(PawNotesAIError):
    """Malformed body or missing/oversized fields."""

    status_code = 400
    message = "Invalid request"


class ConfigurationError(PawNotesAIError):
    """An upstream API key is missing."""

    status_code = 503
    message = "Service temporarily unavailable"


class UpstreamError(PawNotesAIError):
    """The upstream provider failed, or answered with something unusable."""

    status_code = 503
    message = "Failed to get AI response. Please try again."

    def __init__(self, message: Optional[str] = None, *, upstream_status: Optional[int] = None, **kwargs):
        if upstream_status == 429 and "status_code" not in kwargs:
            kwargs["status_code"] = 429
        super().__init__(message, **kwargs)
        self.upstream_status = upstream_status

    @property
    def throttled(self) -> bool:
        return self.status_code == 429


class RateLimitExceeded(PawNotesAIError):
    status_code = 429
    message = "Rate limit exceeded. Please try again later."


class InternalError(PawNotesAIError):
    status_code = 500
    message = "Internal server error. Please try again later."
