"""
kube_discovery.tier0_core.config
──────────────────────────────────
Typed configuration with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic; values are prefixed with
KUBE_DISCOVERY_ unless an alias says otherwise. Invalid values raise
ConfigurationError at startup, not at resolution time.

In-cluster API host and CA come from the official client's loader
(KUBERNETES_SERVICE_HOST/PORT plus the service-account mount).

Minimal stack: pydantic-settings + python-dotenv, kubernetes (in-cluster loader)
"""
from __future__ import annotations

import os
import ssl
from functools import lru_cache
from typing import Any

from kubernetes.client import Configuration
from kubernetes.config import ConfigException
from kubernetes.config.incluster_config import InClusterConfigLoader
from pydantic import Field, SecretStr, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kube_discovery.tier0_core.errors import ConfigurationError
from kube_discovery.tier0_core.secrets import (
    SERVICE_ACCOUNT_CA,
    SERVICE_ACCOUNT_NAMESPACE,
    SERVICE_ACCOUNT_TOKEN,
    read_file_contents,
)

DEFAULT_MASTER_URL = "https://kubernetes.default.svc"
DEFAULT_NAMESPACE = "default"


class DiscoverySettings(BaseSettings):
    """Settings for one endpoint resolver."""

    model_config = SettingsConfigDict(
        env_prefix="KUBE_DISCOVERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Selection ─────────────────────────────────────────────────────────────
    service_name: str = ""
    service_label_name: str | None = None
    service_label_value: str | None = None
    namespace: str | None = None
    kubernetes_namespace: str | None = Field(default=None, validation_alias="KUBERNETES_NAMESPACE")
    namespace_file: str = SERVICE_ACCOUNT_NAMESPACE

    # ── API access ────────────────────────────────────────────────────────────
    kubernetes_master: str | None = None
    api_token: SecretStr | None = None
    api_token_file: str = SERVICE_ACCOUNT_TOKEN
    ca_cert_file: str = SERVICE_ACCOUNT_CA
    verify_ssl: bool = True
    timeout: float = 10.0

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator(
        "service_label_name", "service_label_value", "namespace",
        "kubernetes_namespace", "kubernetes_master",
        mode="before",
    )
    @classmethod
    def blank_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v!r}")
        return v

    def resolved_namespace(self) -> str:
        """
        Configured namespace, else $KUBERNETES_NAMESPACE, else the pod's own
        namespace from the service-account mount, else "default".
        Raises OSError if the namespace file exists but cannot be read.
        """
        if self.namespace:
            return self.namespace
        if self.kubernetes_namespace:
            return self.kubernetes_namespace
        if os.path.isfile(self.namespace_file):
            found = read_file_contents(self.namespace_file).strip()
            if found:
                return found
        return DEFAULT_NAMESPACE

    def in_cluster_configuration(self) -> Configuration | None:
        """API host and CA path as the official client sees them; None outside a pod."""
        configuration = Configuration()
        loader = InClusterConfigLoader(
            token_filename=self.api_token_file,
            cert_filename=self.ca_cert_file,
            try_refresh_token=False,
        )
        try:
            loader.load_and_set(configuration)
        except ConfigException:
            return None
        return configuration

    def resolved_master(self) -> str:
        if self.kubernetes_master:
            return self.kubernetes_master
        in_cluster = self.in_cluster_configuration()
        if in_cluster is not None:
            return in_cluster.host
        return DEFAULT_MASTER_URL

    def tls_verify(self) -> bool | ssl.SSLContext:
        """Value for httpx ``verify``: trusts the cluster CA bundle inside a pod."""
        if not self.verify_ssl:
            return False
        in_cluster = self.in_cluster_configuration()
        if in_cluster is not None and in_cluster.ssl_ca_cert:
            return ssl.create_default_context(cafile=in_cluster.ssl_ca_cert)
        return True


def load_settings(**overrides: Any) -> DiscoverySettings:
    """
    Build settings from env/.env plus *overrides*.
    Raises ConfigurationError (not Pydantic's) on invalid values.
    """
    try:
        return DiscoverySettings(**overrides)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]): err["msg"]
            for err in exc.errors()
        }
        raise ConfigurationError(
            "invalid_settings",
            user_message=f"Invalid discovery settings: {', '.join(fields)}.",
            fields=fields,
        ) from exc


@lru_cache(maxsize=1)
def get_settings() -> DiscoverySettings:
    """
    Return the singleton settings. Cached after first call.
    Call _reset_settings() in tests to pick up new env vars.
    """
    return load_settings()


def _reset_settings() -> None:
    """For tests — clear the settings cache."""
    get_settings.cache_clear()


__all__ = [
    "DiscoverySettings",
    "load_settings",
    "get_settings",
    "DEFAULT_MASTER_URL",
    "DEFAULT_NAMESPACE",
]
