"""
kube_discovery.tier2_platform.models
──────────────────────────────────────
Pydantic models for the slice of the Kubernetes core/v1 Endpoints schema the
resolver reads. Unknown fields are ignored, except on EndpointAddress where
they are kept as free-form extra properties (the service port annotation
lives there).

``null`` collections from the API are normalised to empty lists, including
when a field is reassigned after construction.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SERVICE_PORT_KEY = "hazelcast-service-port"


def _none_to_empty_list(v: Any) -> Any:
    return [] if v is None else v


def parse_port(value: Any) -> int | None:
    """Return *value* as a TCP port number, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        port = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    if 0 < port < 65536:
        return port
    return None


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )


class ObjectMeta(_ApiModel):
    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def none_to_empty_dict(cls, v: Any) -> Any:
        return {} if v is None else v


class EndpointAddress(_ApiModel):
    """One ready (or not-ready) pod address. Extra JSON keys are preserved."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )

    ip: str | None = None
    hostname: str | None = None
    node_name: str | None = Field(default=None, alias="nodeName")
    target_ref: dict[str, Any] | None = Field(default=None, alias="targetRef")

    @property
    def additional_properties(self) -> dict[str, Any]:
        extra = self.model_extra
        return extra if extra is not None else {}

    def extra_property(self, key: str) -> str | None:
        value = self.additional_properties.get(key)
        if value is None:
            return None
        return str(value)


class EndpointPort(_ApiModel):
    name: str | None = None
    port: int
    protocol: str | None = "TCP"


class EndpointSubset(_ApiModel):
    addresses: list[EndpointAddress] = Field(default_factory=list)
    not_ready_addresses: list[EndpointAddress] = Field(
        default_factory=list, alias="notReadyAddresses"
    )
    ports: list[EndpointPort] = Field(default_factory=list)

    @field_validator("addresses", "not_ready_addresses", "ports", mode="before")
    @classmethod
    def normalise_null(cls, v: Any) -> Any:
        return _none_to_empty_list(v)

    def port_named(self, name: str) -> int | None:
        for entry in self.ports:
            if entry.name == name:
                return parse_port(entry.port)
        return None


class Endpoints(_ApiModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    subsets: list[EndpointSubset] = Field(default_factory=list)

    @field_validator("subsets", mode="before")
    @classmethod
    def normalise_null(cls, v: Any) -> Any:
        return _none_to_empty_list(v)


class EndpointsList(_ApiModel):
    kind: str = "EndpointsList"
    api_version: str = Field(default="v1", alias="apiVersion")
    items: list[Endpoints] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def normalise_null(cls, v: Any) -> Any:
        return _none_to_empty_list(v)


__all__ = [
    "SERVICE_PORT_KEY",
    "parse_port",
    "ObjectMeta",
    "EndpointAddress",
    "EndpointPort",
    "EndpointSubset",
    "Endpoints",
    "EndpointsList",
]
