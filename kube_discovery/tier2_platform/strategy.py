"""
kube_discovery.tier2_platform.strategy
────────────────────────────────────────
Discovery strategy facade for a membership layer: start() wires settings,
token and API client into a ServiceEndpointResolver; discover_nodes()
resolves once; stop() releases the client if the strategy created it.
"""
from __future__ import annotations

from kube_discovery.tier0_core.config import DiscoverySettings, get_settings
from kube_discovery.tier0_core.errors import DiscoveryError
from kube_discovery.tier0_core.logging import get_logger
from kube_discovery.tier0_core.secrets import FileTokenProvider
from kube_discovery.tier2_platform.api_client import EndpointsApi, KubernetesClient
from kube_discovery.tier2_platform.discovery import (
    DiscoveryNode,
    ServiceEndpointResolver,
    criteria_from_settings,
)

log = get_logger(__name__)


class KubernetesDiscoveryStrategy:
    def __init__(
        self,
        settings: DiscoverySettings | None = None,
        client: EndpointsApi | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._owns_client = False
        self._resolver: ServiceEndpointResolver | None = None

    @property
    def is_started(self) -> bool:
        return self._resolver is not None

    def start(self) -> None:
        if self._resolver is not None:
            return
        settings = self._settings or get_settings()
        criteria = criteria_from_settings(settings)
        if self._client is None:
            token = settings.api_token
            if token is None:
                # reread on every request
                token = FileTokenProvider(settings.api_token_file)
            self._client = KubernetesClient(
                criteria.kubernetes_master,
                token,
                timeout=settings.timeout,
                verify=settings.tls_verify(),
            )
            self._owns_client = True
        self._resolver = ServiceEndpointResolver(criteria, self._client)
        log.info(
            "discovery.started",
            namespace=criteria.namespace,
            master=criteria.kubernetes_master,
            label=criteria.label,
        )

    def discover_nodes(self) -> list[DiscoveryNode]:
        if self._resolver is None:
            raise DiscoveryError("not_started", user_message="Discovery strategy is not started.")
        return self._resolver.resolve()

    def stop(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
            self._owns_client = False
        self._resolver = None

    def __enter__(self) -> "KubernetesDiscoveryStrategy":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = ["KubernetesDiscoveryStrategy"]
