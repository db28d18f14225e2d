"""Helpers for safe debug logging.

Broker URLs carry credentials and inbound payloads are untrusted: any
publisher on the bus can send arbitrary keys, long strings or binary
junk. This module redacts and truncates them before they reach the logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

_SECRET_KEYS: frozenset[str] = frozenset({"password", "passwd", "token", "secret", "authorization"})

_MAX_DEPTH = 8


def redact_url(url: str) -> str:
    """Return *url* with any password replaced by ``<redacted>``."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    netloc = f"{parts.username or ''}:<redacted>@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact_payload(value: Any, *, max_string: int = 128, _depth: int = 0) -> Any:
    """Return a log-safe copy of a raw inbound payload.

    Bytes are summarised by length, strings are truncated, values under
    secret-looking keys are replaced and nesting is capped.
    """
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if _depth >= _MAX_DEPTH and isinstance(value, (Mapping, list)):
        return "<max-depth>"
    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>"
            if str(key).lower() in _SECRET_KEYS
            else redact_payload(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_payload(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return value
