"""
kube_discovery.tier1_runtime.validate
───────────────────────────────────────
Payload validation via Pydantic v2. Raises the package's ValidationError
(not raw Pydantic errors) so callers only ever see one error taxonomy.
"""
from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from kube_discovery.tier0_core.errors import ValidationError

T = TypeVar("T", bound=BaseModel)


def validate_payload(model: Type[T], data: Any) -> T:
    """
    Validate raw decoded JSON against a Pydantic model.

    Usage:
        endpoints = validate_payload(EndpointsList, response.json())
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]): err["msg"]
            for err in exc.errors()
        }
        raise ValidationError(
            code="validation_error",
            user_message=f"Payload does not match {model.__name__}.",
            fields=fields,
        ) from exc


__all__ = ["validate_payload"]
