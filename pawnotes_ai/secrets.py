"""Helper to resolve upstream API keys.

Usage:
    from pawnotes_ai.secrets import resolve_api_key
    api_key = resolve_api_key(settings.GEMINI_API_KEY, settings.GEMINI_SECRET_NAME)

Keys set in the environment win. Otherwise, when a secret name is configured,
the key is read from AWS Secrets Manager. Secrets are cached in a module-level
dict so calls are fast after cold start.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, Optional

import boto3

logger = logging.getLogger(__name__)

_SECRET_FIELDS = ("api_key", "apiKey", "key", "token")

_cached_secrets: Dict[str, Optional[str]] = {}


def _parse_secret_string(secret_string: str) -> Optional[str]:
    try:
        data = json.loads(secret_string)
    except json.JSONDecodeError:
        return secret_string.strip() or None

    if isinstance(data, dict):
        for field in _SECRET_FIELDS:
            value = data.get(field)
            if value:
                return str(value)
        return None
    return str(data) if data else None


def load_secret(secret_name: str) -> Optional[str]:
    """Return the API key stored under ``secret_name``, or None.

    The secret may be a JSON object (``{"api_key": "..."}``) or a plain string.
    """
    if secret_name in _cached_secrets:
        return _cached_secrets[secret_name]

    value = None
    try:
        client = boto3.client("secretsmanager")
        resp = client.get_secret_value(SecretId=secret_name)
        secret_string = resp.get("SecretString")
        if secret_string:
            value = _parse_secret_string(secret_string)
    except Exception as e:
        # boto3 raises several unrelated types here (no region, no credentials,
        # ClientError); all of them mean "no key".
        logger.error(f"Failed to load secret '{secret_name}': {e}")

    # Only successful lookups are cached; a failed one is retried next call.
    if value is not None:
        _cached_secrets[secret_name] = value
    return value


def resolve_api_key(value: Optional[str], secret_name: Optional[str] = None) -> Optional[str]:
    if value:
        return value
    if not secret_name:
        return None
    return load_secret(secret_name)


def clear_cache() -> None:
    _cached_secrets.clear()
