"""
kube_discovery.tier0_core.secrets
───────────────────────────────────
Bearer token retrieval for the Kubernetes API. Tokens are wrapped in
pydantic's SecretStr so they never show up in repr, logs or JSON.

Sources: an explicit value (settings / env) or a file, normally the
service-account token mounted into the pod.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import SecretStr

SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"
SERVICE_ACCOUNT_TOKEN = f"{SERVICE_ACCOUNT_DIR}/token"
SERVICE_ACCOUNT_NAMESPACE = f"{SERVICE_ACCOUNT_DIR}/namespace"
SERVICE_ACCOUNT_CA = f"{SERVICE_ACCOUNT_DIR}/ca.crt"


def read_file_contents(path: str) -> str:
    """
    Return the whole file at *path* decoded as UTF-8, unchanged.
    Raises OSError (FileNotFoundError, PermissionError, ...) if unreadable.
    """
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


# ── Provider protocol ─────────────────────────────────────────────────────────

@runtime_checkable
class TokenProvider(Protocol):
    def get(self) -> SecretStr: ...


class StaticTokenProvider:
    """Token supplied directly, e.g. from KUBE_DISCOVERY_API_TOKEN."""

    def __init__(self, token: str | SecretStr) -> None:
        self._token = token if isinstance(token, SecretStr) else SecretStr(token)

    def get(self) -> SecretStr:
        return self._token


class FileTokenProvider:
    """
    Token read from a file on every call. Projected service-account tokens
    are rotated by the kubelet, so the file is never cached.
    Surrounding whitespace is stripped; the mounted file may end in a newline.
    """

    def __init__(self, path: str = SERVICE_ACCOUNT_TOKEN) -> None:
        self.path = path

    def get(self) -> SecretStr:
        return SecretStr(read_file_contents(self.path).strip())


__all__ = [
    "SERVICE_ACCOUNT_TOKEN",
    "SERVICE_ACCOUNT_NAMESPACE",
    "SERVICE_ACCOUNT_CA",
    "read_file_contents",
    "TokenProvider",
    "StaticTokenProvider",
    "FileTokenProvider",
]
