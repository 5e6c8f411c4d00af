import logging

from .config import settings
from .http import HttpRequest, HttpResponse
from .services import build_services

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Built once per execution environment; the summary rate limiter lives here.
SERVICES = build_services(settings)


def _proxy_response(response: HttpResponse) -> dict:
    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": response.body,
    }


def _invoke(name: str, event, context=None) -> dict:
    """Run the ``name`` function against a Lambda event.

    Accepts two shapes:
    - API Gateway / function URL proxy: event has `httpMethod` (or
      `requestContext.http.method`), `headers` and a JSON string `body`
    - direct invocation: event is the JSON body itself

    Returns an API Gateway proxy-style response. CORS headers are present on
    success, error and preflight responses alike.
    """
    service = SERVICES[name]
    if context is not None:
        logger.debug(f"{name} invocation {getattr(context, 'aws_request_id', None)}")
    try:
        request = HttpRequest.from_lambda_event(event)
    except Exception as exc:
        return _proxy_response(service.error_response(exc))
    return _proxy_response(service.handle(request))


def gemini_ai_handler(event, context=None):
    return _invoke("gemini-ai", event, context)


def ai_summary_handler(event, context=None):
    return _invoke("ai-summary", event, context)


def image_generator_handler(event, context=None):
    return _invoke("image-generator", event, context)


FUNCTIONS = {
    "gemini-ai": gemini_ai_handler,
    "ai-summary": ai_summary_handler,
    "image-generator": image_generator_handler,
}
