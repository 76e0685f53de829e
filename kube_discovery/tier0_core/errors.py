"""
kube_discovery.tier0_core.errors
──────────────────────────────────
Standard error taxonomy for discovery. Every error carries a stable code, a
user-safe message, and internal detail. Transport failures surface as
UpstreamError; misconfiguration is rejected up front with ConfigurationError.

An empty node list is never an error. These exceptions mean "could not
determine endpoints at all".
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class DiscoveryError(Exception):
    """
    Base class for all discovery errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: safe to print on a CLI or in an operator log
    - detail: internal context
    - status_code: HTTP-like status describing the failure class
    """

    status_code: int = 500
    code: str = "discovery_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Endpoint discovery failed.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


# ── Typed error classes ───────────────────────────────────────────────────────

class ConfigurationError(DiscoveryError):
    """Misconfiguration detected while building the resolver."""
    status_code = 500
    code = "configuration_error"


class AuthError(DiscoveryError):
    """The API rejected the bearer token."""
    status_code = 401
    code = "auth_error"


class ForbiddenError(DiscoveryError):
    """Token is valid but lacks permission to list endpoints."""
    status_code = 403
    code = "forbidden"


class ValidationError(DiscoveryError):
    """Payload did not match the expected schema."""
    status_code = 422
    code = "validation_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Validation failed.",
        fields: dict | None = None,
        **metadata: Any,
    ) -> None:
        self.fields = fields or {}
        super().__init__(code, user_message, **metadata)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


class UpstreamError(DiscoveryError):
    """The Kubernetes API could not be reached or answered with an error."""
    status_code = 502
    code = "upstream_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Kubernetes API request failed.",
        upstream_status: int | None = None,
        **metadata: Any,
    ) -> None:
        self.upstream_status = upstream_status
        super().__init__(code, user_message, **metadata)


__all__ = [
    "DiscoveryError",
    "ConfigurationError",
    "AuthError",
    "ForbiddenError",
    "ValidationError",
    "UpstreamError",
]
