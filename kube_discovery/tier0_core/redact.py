"""
kube_discovery.tier0_core.redact
──────────────────────────────────
Credential redaction for log events. The API token travels through settings,
criteria and request headers, so every structlog event passes through
``structlog_redact_processor`` before rendering.
"""
from __future__ import annotations

import re
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "token", "api_token", "access_token", "bearer", "secret",
    "authorization", "password", "client_secret", "private_key",
})

_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.I), "Bearer [REDACTED]"),
    (re.compile(r"(token|secret)\s*=\s*[^\s&\"']+", re.I), r"\1=[REDACTED]"),
]

REDACTED = "[REDACTED]"


def redact_dict(
    data: dict[str, Any],
    sensitive_keys: frozenset[str] | None = None,
    *,
    deep: bool = True,
) -> dict[str, Any]:
    """
    Return a copy of *data* with sensitive key values replaced by REDACTED
    and bearer tokens scrubbed out of string values.
    """
    keys = sensitive_keys if sensitive_keys is not None else _SENSITIVE_KEYS
    result: dict[str, Any] = {}
    for k, v in data.items():
        if k.lower() in keys:
            result[k] = REDACTED
        elif deep and isinstance(v, dict):
            result[k] = redact_dict(v, keys, deep=True)
        elif isinstance(v, str):
            result[k] = scrub_string(v)
        else:
            result[k] = v
    return result


def scrub_string(text: str) -> str:
    """Apply regex-based scrubbing to an arbitrary string."""
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def structlog_redact_processor(
    logger: Any,
    method: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor; place it before the renderer."""
    return redact_dict(event_dict)


__all__ = ["REDACTED", "redact_dict", "scrub_string", "structlog_redact_processor"]
