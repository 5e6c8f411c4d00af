import requests

from ..errors import UpstreamError


def error_from_response(provider: str, response: requests.Response) -> UpstreamError:
    """Wrap a non-2xx upstream response. The body goes to ``detail`` only."""
    return UpstreamError(
        upstream_status=response.status_code,
        detail=f"{provider} API error: {response.status_code} - {response.text}",
    )
