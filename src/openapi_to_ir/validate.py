"""Structural validation of a produced IR service."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from jsonschema.validators import validator_for

from .ir import Parameter, Property, ReturnType, Service, TypedValue


@dataclass(frozen=True)
class ServiceValidationError:
    """One structural problem found in an IR service."""

    path: str
    message: str


@lru_cache(maxsize=1)
def service_json_schema() -> dict[str, Any]:
    """JSON schema of the serialized IR."""
    return Service.model_json_schema(by_alias=True)


def validate_service(service: Service) -> list[ServiceValidationError]:
    """Check schema conformance, referential closure and name uniqueness."""
    errors: list[ServiceValidationError] = []

    schema = service_json_schema()
    validator_class = validator_for(schema)
    validator_class.check_schema(schema)
    payload = service.model_dump(mode="json", by_alias=True)
    for error in validator_class(schema).iter_errors(payload):
        location = "/".join(str(part) for part in error.absolute_path)
        errors.append(ServiceValidationError(path=f"/{location}", message=error.message))

    errors.extend(_closure_errors(service))
    errors.extend(_uniqueness_errors(service))
    return errors


def _closure_errors(service: Service) -> Iterator[ServiceValidationError]:
    known = {
        *(item.name.value for item in service.types),
        *(item.name.value for item in service.enums),
        *(item.name.value for item in service.unions),
    }
    for path, value in _typed_values(service):
        if value.is_primitive:
            continue
        name = value.type_name.value
        if name not in known:
            yield ServiceValidationError(
                path=path,
                message=f"Type '{name}' is not defined as a type, enum or union",
            )


def _typed_values(
    service: Service,
) -> Iterator[tuple[str, Parameter | Property | ReturnType | TypedValue]]:
    for i, interface in enumerate(service.interfaces):
        for j, method in enumerate(interface.methods):
            base = f"/interfaces/{i}/methods/{j}"
            for k, parameter in enumerate(method.parameters):
                yield f"{base}/parameters/{k}", parameter
            if method.return_type is not None:
                yield f"{base}/returnType", method.return_type
    for i, type_def in enumerate(service.types):
        for j, prop in enumerate(type_def.properties):
            yield f"/types/{i}/properties/{j}", prop
    for i, union in enumerate(service.unions):
        for j, member in enumerate(union.members):
            yield f"/unions/{i}/members/{j}", member


def _uniqueness_errors(service: Service) -> Iterator[ServiceValidationError]:
    collections = {
        "types": [item.name.value for item in service.types],
        "enums": [item.name.value for item in service.enums],
        "unions": [item.name.value for item in service.unions],
        "interfaces": [item.name.value for item in service.interfaces],
    }
    for collection, names in collections.items():
        for name, count in Counter(names).items():
            if count > 1:
                yield ServiceValidationError(
                    path=f"/{collection}",
                    message=f"Name '{name}' appears {count} times",
                )


def format_errors(errors: list[ServiceValidationError]) -> str:
    """Render validation errors as CLI output text."""
    lines = [f"Validation errors: {len(errors)}"]
    lines.extend(f"- {error.path}: {error.message}" for error in errors)
    return "\n".join(lines)
