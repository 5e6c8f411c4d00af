import os
import sys
from unittest import mock

import pytest

# Ensure the project root is on sys.path so tests run without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from pawnotes_ai import secrets  # noqa: E402
from pawnotes_ai.config import Settings  # noqa: E402


def make_settings(**overrides) -> Settings:
    values = {
        "GEMINI_API_KEY": "gemini-test-key",
        "GEMINI_SECRET_NAME": None,
        "OPENAI_API_KEY": "openai-test-key",
        "OPENAI_IMAGE_API_KEY": None,
        "OPENAI_SECRET_NAME": None,
        "RATE_LIMIT_REDIS_URL": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_response(status_code=200, json_data=None, text=""):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


def gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def echo_gemini(url, json=None, **kwargs):
    """Deterministic fake upstream: answers with the tail of the user prompt."""
    sent = json["contents"][0]["parts"][0]["text"]
    return make_response(200, gemini_payload(f"  echo: {sent.rsplit('User: ', 1)[-1]}  "))


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture(autouse=True)
def clear_secret_cache():
    secrets.clear_cache()
    yield
    secrets.clear_cache()
