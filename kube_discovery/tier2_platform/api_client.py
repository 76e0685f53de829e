"""
kube_discovery.tier2_platform.api_client
──────────────────────────────────────────
Synchronous HTTP client for the Kubernetes API endpoints resource. Injects
the bearer token, maps transport and status failures onto the discovery
error taxonomy, and validates the response body into EndpointsList.

Backed by: httpx (sync). One reusable connection pool per client; the
client is safe to share between threads.
"""
from __future__ import annotations

import ssl
from typing import Protocol, runtime_checkable
from urllib.parse import quote

import httpx
from pydantic import SecretStr

from kube_discovery.tier0_core.errors import (
    AuthError,
    ForbiddenError,
    UpstreamError,
    ValidationError,
)
from kube_discovery.tier0_core.logging import get_logger
from kube_discovery.tier0_core.secrets import StaticTokenProvider, TokenProvider
from kube_discovery.tier1_runtime.validate import validate_payload
from kube_discovery.tier2_platform.models import EndpointsList

log = get_logger(__name__)

Label = tuple[str, str]


@runtime_checkable
class EndpointsApi(Protocol):
    """What the resolver needs from a cluster API client."""

    def list_endpoints(self, namespace: str, label: Label | None = None) -> EndpointsList: ...


class KubernetesClient:
    """
    Client for ``GET /api/v1/namespaces/{namespace}/endpoints``.

    Usage::

        with KubernetesClient("https://kubernetes.default.svc", token) as client:
            endpoints = client.list_endpoints("default", label=("app", "hz"))
    """

    def __init__(
        self,
        base_url: str,
        token: str | SecretStr | TokenProvider,
        *,
        timeout: float = 10.0,
        verify: bool | ssl.SSLContext = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        if isinstance(token, (str, SecretStr)):
            token = StaticTokenProvider(token)
        self._token = token
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout,
            verify=verify,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _build_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token.get().get_secret_value()}"}

    def list_endpoints(self, namespace: str, label: Label | None = None) -> EndpointsList:
        path = f"/api/v1/namespaces/{quote(namespace, safe='')}/endpoints"
        params = {}
        if label is not None:
            params["labelSelector"] = f"{label[0]}={label[1]}"

        log.debug("k8s.endpoints.list", namespace=namespace, label_selector=params.get("labelSelector"))
        try:
            response = self._client.get(path, params=params, headers=self._build_headers())
        except httpx.HTTPError as exc:
            raise UpstreamError(
                user_message=f"Kubernetes API at {self._base_url} is unreachable.",
                detail=f"GET {path} failed: {exc}",
            ) from exc

        _raise_for_status(response, path)

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "invalid_response",
                user_message="Kubernetes API returned a non-JSON body.",
                upstream_status=response.status_code,
            ) from exc
        try:
            return validate_payload(EndpointsList, body)
        except ValidationError as exc:
            raise UpstreamError(
                "invalid_response",
                user_message="Kubernetes API returned an unexpected endpoints payload.",
                upstream_status=response.status_code,
                fields=exc.fields,
            ) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "KubernetesClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _raise_for_status(response: httpx.Response, path: str) -> None:
    if response.is_success:
        return
    status = response.status_code
    detail = f"GET {path} returned {status}: {response.text[:200]}"
    if status == 401:
        raise AuthError(user_message="Kubernetes API rejected the token.", detail=detail)
    if status == 403:
        raise ForbiddenError(
            user_message="Token is not allowed to list endpoints in this namespace.",
            detail=detail,
        )
    raise UpstreamError(
        user_message=f"Kubernetes API answered {status}.",
        detail=detail,
        upstream_status=status,
    )


__all__ = ["EndpointsApi", "KubernetesClient", "Label"]
