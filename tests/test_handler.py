import base64
import json
from unittest import mock

import pytest

from conftest import echo_gemini, make_response, make_settings
from pawnotes_ai import handler as handler_module
from pawnotes_ai.services import build_services

GEMINI_POST = "pawnotes_ai.upstream.gemini.requests.post"
OPENAI_POST = "pawnotes_ai.upstream.openai.requests.post"


@pytest.fixture(autouse=True)
def services():
    with mock.patch.dict(handler_module.SERVICES, build_services(make_settings())):
        yield handler_module.SERVICES


def _api_gateway_event(body, method="POST", headers=None):
    return {
        "httpMethod": method,
        "headers": headers or {"Content-Type": "application/json"},
        "body": json.dumps(body) if body is not None else None,
    }


def test_gemini_handler_api_gateway_event():
    with mock.patch(GEMINI_POST, side_effect=echo_gemini):
        resp = handler_module.gemini_ai_handler(_api_gateway_event({"prompt": "hi", "action": "haiku"}))

    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"result": "echo: hi"}
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Content-Type"] == "application/json"


def test_direct_invocation_event_is_the_body():
    with mock.patch(GEMINI_POST, side_effect=echo_gemini):
        resp = handler_module.gemini_ai_handler({"prompt": "direct", "action": "chat"})
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"])["result"] == "echo: direct"


def test_http_api_v2_event():
    event = {
        "requestContext": {"http": {"method": "POST"}},
        "headers": {"content-type": "application/json"},
        "body": base64.b64encode(json.dumps({"prompt": "b64"}).encode()).decode(),
        "isBase64Encoded": True,
    }
    with mock.patch(GEMINI_POST, side_effect=echo_gemini):
        resp = handler_module.gemini_ai_handler(event)
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"])["result"] == "echo: b64"


@pytest.mark.parametrize("name", ["gemini-ai", "ai-summary", "image-generator"])
def test_preflight_for_every_function(name):
    with mock.patch(GEMINI_POST) as mgemini, mock.patch(OPENAI_POST) as mopenai:
        resp = handler_module.FUNCTIONS[name]({"httpMethod": "OPTIONS", "headers": {}})
    assert resp["statusCode"] == 200
    assert resp["body"] == ""
    assert resp["headers"] == {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    }
    mgemini.assert_not_called()
    mopenai.assert_not_called()


def test_invalid_json_body():
    event = {"httpMethod": "POST", "headers": {}, "body": "{not json"}
    resp = handler_module.gemini_ai_handler(event)
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON in request body"}
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_summary_handler_rate_limits_by_forwarded_for():
    completion = make_response(200, {"choices": [{"message": {"content": "sum"}}]})
    event = _api_gateway_event({"content": "note"}, headers={"X-Forwarded-For": "192.0.2.10"})
    with mock.patch(OPENAI_POST, return_value=completion):
        statuses = [handler_module.ai_summary_handler(event)["statusCode"] for _ in range(11)]
    assert statuses == [200] * 10 + [429]


def test_image_handler():
    upstream = make_response(200, {"data": [{"b64_json": "QUJD"}]})
    with mock.patch(OPENAI_POST, return_value=upstream):
        resp = handler_module.image_generator_handler(_api_gateway_event({"prompt": "a paw"}))
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"result": "data:image/png;base64,QUJD"}


def test_context_is_optional_and_accepted():
    context = mock.Mock(aws_request_id="req-1")
    with mock.patch(GEMINI_POST, side_effect=echo_gemini):
        resp = handler_module.gemini_ai_handler({"prompt": "hi"}, context)
    assert resp["statusCode"] == 200


def test_undecodable_base64_body_is_a_400():
    resp = handler_module.gemini_ai_handler({"httpMethod": "POST", "body": "!!!not-base64!!!", "isBase64Encoded": True})
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON in request body"}
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


@pytest.mark.parametrize("request_context", [None, "nope", {"http": None}])
def test_malformed_request_context_does_not_escape(request_context):
    with mock.patch(GEMINI_POST, side_effect=echo_gemini):
        resp = handler_module.gemini_ai_handler(
            {"requestContext": request_context, "body": json.dumps({"prompt": "ctx"})}
        )
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"result": "echo: ctx"}


def test_unexpected_parse_failure_becomes_500():
    with mock.patch("pawnotes_ai.handler.HttpRequest.from_lambda_event", side_effect=RuntimeError("boom")):
        resp = handler_module.ai_summary_handler({"body": "{}"})
    assert resp["statusCode"] == 500
    assert json.loads(resp["body"]) == {"error": "Internal server error. Please try again later."}
