"""
kube_discovery.tier2_platform.discovery
─────────────────────────────────────────
Service endpoint resolution. Lists the Kubernetes Endpoints of a namespace
(optionally narrowed by a service label) and flattens every ready address
into a DiscoveryNode for the cluster membership layer.

Each resolve() is one fresh, read-only API call. Nothing is cached, retried
or watched; API failures propagate to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import SecretStr

from kube_discovery.tier0_core.config import DiscoverySettings
from kube_discovery.tier0_core.errors import ConfigurationError
from kube_discovery.tier0_core.logging import get_logger
from kube_discovery.tier0_core.secrets import FileTokenProvider
from kube_discovery.tier2_platform.api_client import EndpointsApi
from kube_discovery.tier2_platform.models import (
    SERVICE_PORT_KEY,
    EndpointAddress,
    EndpointSubset,
    EndpointsList,
    parse_port,
)

log = get_logger(__name__)


@dataclass(frozen=True)
class Address:
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class DiscoveryNode:
    """A discovered member. Only the private address is ever populated."""
    private_address: Address
    public_address: Address | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectionCriteria:
    """
    Which endpoints to resolve and how to reach the API.

    ``service_name`` is accepted and kept for configuration compatibility but
    does not filter anything. The label name and value must be given together.
    """
    namespace: str
    kubernetes_master: str
    api_token: SecretStr = field(repr=False)
    service_name: str = ""
    service_label_name: str | None = None
    service_label_value: str | None = None

    def __post_init__(self) -> None:
        if not self.namespace:
            raise ConfigurationError(user_message="A namespace is required.")
        has_name = bool(self.service_label_name)
        has_value = bool(self.service_label_value)
        if has_name != has_value:
            raise ConfigurationError(
                "label_selector_incomplete",
                user_message="Service label name and value must be set together.",
                service_label_name=self.service_label_name,
            )

    @property
    def label(self) -> tuple[str, str] | None:
        if self.service_label_name and self.service_label_value:
            return (self.service_label_name, self.service_label_value)
        return None


def criteria_from_settings(settings: DiscoverySettings) -> SelectionCriteria:
    """Build validated criteria, reading the token file when no token is set."""
    token = settings.api_token
    if token is None:
        try:
            token = FileTokenProvider(settings.api_token_file).get()
        except OSError as exc:
            raise ConfigurationError(
                "api_token_unavailable",
                user_message=f"Cannot read API token from {settings.api_token_file}.",
            ) from exc
    if not token.get_secret_value():
        raise ConfigurationError("api_token_unavailable", user_message="API token is empty.")
    try:
        namespace = settings.resolved_namespace()
    except OSError as exc:
        raise ConfigurationError(
            "namespace_unavailable",
            user_message=f"Cannot read namespace from {settings.namespace_file}.",
        ) from exc
    return SelectionCriteria(
        namespace=namespace,
        kubernetes_master=settings.resolved_master(),
        api_token=token,
        service_name=settings.service_name,
        service_label_name=settings.service_label_name,
        service_label_value=settings.service_label_value,
    )


class ServiceEndpointResolver:
    """
    Resolve discovery nodes from the Endpoints resource.

    Usage::

        resolver = ServiceEndpointResolver(criteria, client)
        nodes = resolver.resolve()
    """

    def __init__(self, criteria: SelectionCriteria, client: EndpointsApi) -> None:
        self._criteria = criteria
        self._client = client

    @property
    def criteria(self) -> SelectionCriteria:
        return self._criteria

    def resolve(self) -> list[DiscoveryNode]:
        namespace = self._criteria.namespace
        label = self._criteria.label
        log.debug("endpoints.resolve.start", namespace=namespace, label=label)

        if label is not None:
            endpoints = self._client.list_endpoints(namespace, label=label)
        else:
            endpoints = self._client.list_endpoints(namespace)

        nodes = list(self._flatten(endpoints))
        log.info("endpoints.resolve.done", namespace=namespace, nodes=len(nodes))
        return nodes

    def _flatten(self, endpoints: EndpointsList):
        for record in endpoints.items:
            for subset in record.subsets:
                for address in subset.addresses:
                    node = self._to_node(address, subset, record.metadata.name)
                    if node is not None:
                        yield node

    def _to_node(
        self, address: EndpointAddress, subset: EndpointSubset, service: str | None
    ) -> DiscoveryNode | None:
        port = _resolve_port(address, subset)
        if not address.ip or port is None:
            log.warning(
                "endpoints.address.skipped",
                service=service,
                ip=address.ip,
                reason="no ip" if not address.ip else "no port",
            )
            return None
        return DiscoveryNode(private_address=Address(address.ip, port))


def _resolve_port(address: EndpointAddress, subset: EndpointSubset) -> int | None:
    # address annotation first, then the subset's named port
    annotated = address.extra_property(SERVICE_PORT_KEY)
    if annotated is not None:
        port = parse_port(annotated)
        if port is not None:
            return port
    return subset.port_named(SERVICE_PORT_KEY)


__all__ = [
    "Address",
    "DiscoveryNode",
    "SelectionCriteria",
    "ServiceEndpointResolver",
    "criteria_from_settings",
]
