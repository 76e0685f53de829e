"""
kube_discovery
──────────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from kube_discovery.tier0_core.logging import configure_logging, get_logger
from kube_discovery.tier0_core.errors import (
    DiscoveryError,
    ConfigurationError,
    AuthError,
    ForbiddenError,
    ValidationError,
    UpstreamError,
)
from kube_discovery.tier0_core.config import get_settings, load_settings, DiscoverySettings
from kube_discovery.tier0_core.secrets import read_file_contents

from kube_discovery.tier2_platform.models import EndpointsList, SERVICE_PORT_KEY
from kube_discovery.tier2_platform.api_client import EndpointsApi, KubernetesClient
from kube_discovery.tier2_platform.discovery import (
    Address,
    DiscoveryNode,
    SelectionCriteria,
    ServiceEndpointResolver,
    criteria_from_settings,
)
from kube_discovery.tier2_platform.strategy import KubernetesDiscoveryStrategy

__version__ = "0.1.0"
__all__ = [
    # logging
    "configure_logging", "get_logger",
    # errors
    "DiscoveryError", "ConfigurationError", "AuthError",
    "ForbiddenError", "ValidationError", "UpstreamError",
    # config
    "get_settings", "load_settings", "DiscoverySettings",
    # secrets
    "read_file_contents",
    # models
    "EndpointsList", "SERVICE_PORT_KEY",
    # api client
    "EndpointsApi", "KubernetesClient",
    # discovery
    "Address", "DiscoveryNode", "SelectionCriteria",
    "ServiceEndpointResolver", "criteria_from_settings",
    # strategy
    "KubernetesDiscoveryStrategy",
]
