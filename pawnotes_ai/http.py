"""Transport-neutral request/response types.

Both the Lambda handlers and the FastAPI routes translate their native shapes
into ``HttpRequest`` and back out of ``HttpResponse``, so the services never see
API Gateway events or Starlette objects.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .errors import ValidationError

DEFAULT_ALLOWED_HEADERS = ("authorization", "x-client-info", "apikey", "content-type")
UNKNOWN_CLIENT = "unknown"


def cors_headers(allowed_headers: Optional[Iterable[str]] = None) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": ", ".join(allowed_headers or DEFAULT_ALLOWED_HEADERS),
    }


@dataclass
class HttpRequest:
    method: str = "POST"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self):
        self.method = (self.method or "POST").upper()
        self.headers = {str(k).lower(): v for k, v in (self.headers or {}).items()}

    @classmethod
    def from_lambda_event(cls, event: Any) -> "HttpRequest":
        """Build a request from a Lambda event.

        Accepts API Gateway REST (``httpMethod``) and HTTP API / function URL
        (``requestContext.http.method``) proxy events. Anything else is treated
        as a direct invocation whose event *is* the JSON body.
        """
        if not isinstance(event, dict):
            return cls(body=event)

        method = event.get("httpMethod")
        if method is None:
            request_context = event.get("requestContext")
            http = request_context.get("http") if isinstance(request_context, dict) else None
            method = http.get("method") if isinstance(http, dict) else None
        if method is None and "body" not in event:
            return cls(body=event)

        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body, validate=True)
            except (binascii.Error, TypeError, ValueError):
                raise ValidationError("Invalid JSON in request body")
        headers = event.get("headers")
        return cls(method=method or "POST", headers=headers if isinstance(headers, dict) else {}, body=body)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def client_key(self) -> str:
        forwarded = self.header("x-forwarded-for")
        if not forwarded:
            return UNKNOWN_CLIENT
        return forwarded.split(",")[0].strip() or UNKNOWN_CLIENT

    def json(self) -> Dict[str, Any]:
        body = self.body
        if isinstance(body, dict):
            return body
        if isinstance(body, (bytes, bytearray)):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                raise ValidationError("Invalid JSON in request body")
        if not isinstance(body, str) or not body.strip():
            raise ValidationError("Invalid JSON in request body")
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            raise ValidationError("Invalid JSON in request body")
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON in request body")
        return data


@dataclass
class HttpResponse:
    status_code: int
    payload: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def preflight(cls, allowed_headers: Optional[Iterable[str]] = None) -> "HttpResponse":
        return cls(200, None, cors_headers(allowed_headers))

    @classmethod
    def json_response(cls, status_code: int, payload: Dict[str, Any],
                      allowed_headers: Optional[Iterable[str]] = None) -> "HttpResponse":
        headers = cors_headers(allowed_headers)
        headers["Content-Type"] = "application/json"
        return cls(status_code, payload, headers)

    @property
    def body(self) -> str:
        return "" if self.payload is None else json.dumps(self.payload)
