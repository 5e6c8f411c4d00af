import json
from unittest import mock

import pytest

from conftest import make_response, make_settings
from pawnotes_ai.http import HttpRequest
from pawnotes_ai.rate_limit import InMemoryRateLimitStore, RateLimiter
from pawnotes_ai.services import SummaryService

POST_TARGET = "pawnotes_ai.upstream.openai.requests.post"


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _request(body, ip="203.0.113.7"):
    headers = {"X-Forwarded-For": ip} if ip else {}
    return HttpRequest(headers=headers, body=json.dumps(body))


def _completion(text):
    return make_response(200, {"choices": [{"message": {"content": text}}]})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(settings, clock):
    limiter = RateLimiter(InMemoryRateLimitStore(), quota=3, window_seconds=60, clock=clock)
    return SummaryService(settings, rate_limiter=limiter)


def test_summary_success(service):
    with mock.patch(POST_TARGET, return_value=_completion("  A short summary.  ")) as mpost:
        resp = service.handle(_request({"title": "Groceries", "content": "eggs, milk"}))

    assert resp.status_code == 200
    assert resp.payload == {"result": "A short summary."}

    args, kwargs = mpost.call_args
    assert args[0] == "https://api.openai.com/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer openai-test-key"
    sent = kwargs["json"]
    assert sent["model"] == "gpt-4o-mini"
    assert sent["max_tokens"] == 150
    assert sent["temperature"] == 0.3
    assert sent["messages"][0]["role"] == "system"
    assert sent["messages"][1]["content"] == "Please summarize this note:\n\nTitle: Groceries\n\nContent: eggs, milk"


def test_content_only_is_sent_without_title(service):
    with mock.patch(POST_TARGET, return_value=_completion("ok")) as mpost:
        service.handle(_request({"content": "just content"}))
    assert mpost.call_args.kwargs["json"]["messages"][1]["content"] == "Please summarize this note:\n\njust content"


def test_empty_content_and_title_returns_400(service):
    with mock.patch(POST_TARGET) as mpost:
        resp = service.handle(_request({"content": "", "title": ""}))
    assert resp.status_code == 400
    assert resp.payload == {"error": "No content provided to summarize"}
    mpost.assert_not_called()


def test_missing_fields_count_as_empty(service):
    with mock.patch(POST_TARGET) as mpost:
        resp = service.handle(_request({}))
    assert resp.status_code == 400
    assert "No content" in resp.payload["error"]
    mpost.assert_not_called()


def test_content_too_long_returns_400(service):
    with mock.patch(POST_TARGET) as mpost:
        resp = service.handle(_request({"content": "x" * 50001}))
    assert resp.status_code == 400
    assert resp.payload == {"error": "Content too long for summarization"}
    mpost.assert_not_called()


def test_content_at_limit_is_accepted(service):
    with mock.patch(POST_TARGET, return_value=_completion("ok")):
        resp = service.handle(_request({"content": "x" * 50000}))
    assert resp.status_code == 200


def test_title_too_long_returns_400(service):
    with mock.patch(POST_TARGET) as mpost:
        resp = service.handle(_request({"title": "t" * 501, "content": "c"}))
    assert resp.status_code == 400
    assert resp.payload == {"error": "Title too long"}
    mpost.assert_not_called()


def test_non_string_content_returns_400(service):
    resp = service.handle(_request({"content": ["a"]}))
    assert resp.status_code == 400


def test_invalid_json_returns_400(service):
    resp = service.handle(HttpRequest(headers={"X-Forwarded-For": "1.1.1.1"}, body="{nope"))
    assert resp.status_code == 400
    assert resp.payload == {"error": "Invalid JSON in request body"}


def test_rate_limit_blocks_after_quota_and_recovers(service, clock):
    with mock.patch(POST_TARGET, return_value=_completion("ok")) as mpost:
        for _ in range(3):
            assert service.handle(_request({"content": "note"})).status_code == 200
        assert mpost.call_count == 3

        blocked = service.handle(_request({"content": "note"}))
        assert blocked.status_code == 429
        assert blocked.payload == {"error": "Rate limit exceeded. Please try again later."}
        assert mpost.call_count == 3

        # Other clients are unaffected.
        assert service.handle(_request({"content": "note"}, ip="198.51.100.1")).status_code == 200

        clock.now += 61
        assert service.handle(_request({"content": "note"})).status_code == 200


def test_rate_limit_is_checked_before_body_parsing(service):
    for _ in range(3):
        service.handle(_request({}))
    resp = service.handle(HttpRequest(headers={"X-Forwarded-For": "203.0.113.7"}, body="garbage"))
    assert resp.status_code == 429


def test_requests_without_forwarded_for_share_unknown_key(service):
    for _ in range(3):
        service.handle(_request({}, ip=None))
    assert service.handle(_request({}, ip=None)).status_code == 429


def test_forwarded_for_uses_first_address(service):
    for _ in range(3):
        service.handle(_request({}, ip="10.0.0.1, 172.16.0.1"))
    assert service.handle(_request({}, ip="10.0.0.1")).status_code == 429


def test_options_is_not_rate_limited(service):
    for _ in range(5):
        resp = service.handle(HttpRequest(method="OPTIONS", headers={"X-Forwarded-For": "203.0.113.7"}))
        assert resp.status_code == 200
    assert service.handle(_request({})).status_code == 400


def test_missing_api_key_returns_503():
    service = SummaryService(make_settings(OPENAI_API_KEY=None))
    with mock.patch(POST_TARGET) as mpost:
        resp = service.handle(_request({"content": "note"}))
    assert resp.status_code == 503
    assert resp.payload == {"error": "AI summary service temporarily unavailable"}
    mpost.assert_not_called()


def test_upstream_throttling_returns_429(service):
    with mock.patch(POST_TARGET, return_value=make_response(429, text="Rate limit reached for org-abc")):
        resp = service.handle(_request({"content": "note"}))
    assert resp.status_code == 429
    assert resp.payload == {"error": "AI service is currently busy. Please try again in a moment."}
    assert "org-abc" not in resp.body


def test_upstream_failure_returns_503(service):
    with mock.patch(POST_TARGET, return_value=make_response(401, text="Incorrect API key provided: sk-123")):
        resp = service.handle(_request({"content": "note"}))
    assert resp.status_code == 503
    assert resp.payload == {"error": "Failed to generate summary. Please try again."}
    assert "sk-123" not in resp.body


def test_malformed_upstream_response_returns_503(service):
    with mock.patch(POST_TARGET, return_value=make_response(200, {"choices": []})):
        resp = service.handle(_request({"content": "note"}))
    assert resp.status_code == 503


def test_default_limiter_uses_settings():
    service = SummaryService(make_settings(RATE_LIMIT_REQUESTS=1))
    with mock.patch(POST_TARGET, return_value=_completion("ok")):
        assert service.handle(_request({"content": "note"})).status_code == 200
        assert service.handle(_request({"content": "note"})).status_code == 429
