"""Mask credentials in payload dumps.

Debug dumps of requests and responses go to *stderr*, which in CI means
build logs.  :func:`redact` is applied to every dump first.
"""

from __future__ import annotations

import re
from typing import Any

# Keys whose lower-cased name contains one of these are always masked.
_SENSITIVE_KEYS = ("token", "secret", "password", "authorization", "api_key")

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _scrub(text: str, token: str | None) -> str:
    if token and token in text:
        hint = f"<redacted:...{token[-4:]}>" if len(token) >= 4 else "<redacted>"
        text = text.replace(token, "<redacted>" if token in hint else hint)
    return _BEARER_RE.sub(r"\1<redacted>", text)


def _walk(value: Any, token: str | None, sensitive: bool = False) -> Any:
    if isinstance(value, dict):
        return {
            k: _walk(v, token, isinstance(k, str) and any(s in k.lower() for s in _SENSITIVE_KEYS))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_walk(item, token) for item in value]
    if isinstance(value, str):
        return _scrub(value, token)
    return "<redacted>" if sensitive else value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a copy of *payload* with credentials masked.

    Every occurrence of *token* becomes ``<redacted:...XXXX>`` (its last four
    characters), ``Bearer`` credentials become ``Bearer <redacted>``, and
    non-string values under sensitive keys such as ``api_key`` become
    ``<redacted>``.  *payload* itself is left untouched.

    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _walk(payload, token)
