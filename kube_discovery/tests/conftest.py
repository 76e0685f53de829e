"""
kube_discovery test configuration.

No test talks to a real cluster: resolvers get an in-memory EndpointsApi
double, and KubernetesClient tests run over httpx.MockTransport.
"""
from __future__ import annotations

import os

import pytest

os.environ.setdefault("KUBE_DISCOVERY_LOG_LEVEL", "WARNING")
os.environ.setdefault("KUBE_DISCOVERY_LOG_FORMAT", "console")

from kube_discovery.tier2_platform.models import (  # noqa: E402
    SERVICE_PORT_KEY,
    EndpointAddress,
    Endpoints,
    EndpointsList,
    EndpointSubset,
)


class FakeEndpointsApi:
    """Serves one listing per lookup strategy and records every call."""

    def __init__(self) -> None:
        self.in_namespace = EndpointsList()
        self.with_label = EndpointsList()
        self.calls: list[tuple[str, tuple[str, str] | None]] = []

    def list_endpoints(self, namespace, label=None):
        self.calls.append((namespace, label))
        if label is not None:
            return self.with_label
        return self.in_namespace


def _make_endpoints(port, ip: str = "1.1.1.1", name: str = "hazelcast") -> Endpoints:
    """One record with one subset holding one address annotated with *port*."""
    address = EndpointAddress(ip=ip, **{SERVICE_PORT_KEY: str(port)})
    return Endpoints(
        metadata={"name": name},
        subsets=[EndpointSubset(addresses=[address])],
    )


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Fresh settings per test; nothing leaks in from a host cluster."""
    from kube_discovery.tier0_core.config import _reset_settings

    for name in (
        "KUBERNETES_NAMESPACE",
        "KUBERNETES_SERVICE_HOST",
        "KUBERNETES_SERVICE_PORT",
        "KUBE_DISCOVERY_API_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    _reset_settings()
    yield
    _reset_settings()


@pytest.fixture
def fake_api():
    return FakeEndpointsApi()


@pytest.fixture
def make_endpoints():
    """Factory: make_endpoints(port, ip=..., name=...) -> Endpoints."""
    return _make_endpoints
