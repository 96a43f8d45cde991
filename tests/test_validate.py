"""Unit tests for structural IR validation."""

from __future__ import annotations

from openapi_to_ir.ir import (
    EnumDef,
    EnumValue,
    Interface,
    Method,
    Parameter,
    Primitive,
    Property,
    ReturnType,
    Scalar,
    Service,
    TypeDef,
)
from openapi_to_ir.validate import format_errors, service_json_schema, validate_service


def _service(**overrides: object) -> Service:
    fields: dict[str, object] = {
        "source_path": "inline.yaml",
        "title": Scalar[str](value="Inline"),
        "major_version": Scalar[int](value=1),
    }
    fields.update(overrides)
    return Service.model_validate(fields)


def test_empty_service_is_valid() -> None:
    """A service without entities has nothing to violate."""
    assert validate_service(_service()) == []


def test_schema_uses_serialized_field_names() -> None:
    """The JSON schema describes the camelCase wire form."""
    properties = service_json_schema()["properties"]
    assert "majorVersion" in properties
    assert "sourcePath" in properties


def test_unknown_type_reference_is_reported() -> None:
    """Non-primitive references must name a type, enum or union."""
    method = Method(
        name=Scalar[str](value="getThing"),
        parameters=[
            Parameter(
                name=Scalar[str](value="thing"),
                type_name=Scalar[str](value="Missing"),
                is_primitive=False,
                is_array=False,
            )
        ],
        return_type=ReturnType(
            type_name=Scalar[str](value="Color"),
            is_primitive=False,
            is_array=False,
        ),
    )
    service = _service(
        interfaces=[Interface(name=Scalar[str](value="thing"), methods=[method])],
        enums=[
            EnumDef(
                name=Scalar[str](value="Color"),
                values=[EnumValue(content=Scalar[Primitive](value="red"))],
            )
        ],
    )

    errors = validate_service(service)
    assert [(error.path, error.message) for error in errors] == [
        (
            "/interfaces/0/methods/0/parameters/0",
            "Type 'Missing' is not defined as a type, enum or union",
        )
    ]


def test_primitive_references_need_no_definition() -> None:
    """Primitive type names are always resolvable."""
    service = _service(
        types=[
            TypeDef(
                name=Scalar[str](value="Thing"),
                properties=[
                    Property(
                        name=Scalar[str](value="size"),
                        type_name=Scalar[str](value="long"),
                        is_primitive=True,
                        is_array=False,
                    )
                ],
            )
        ]
    )
    assert validate_service(service) == []


def test_duplicate_names_are_reported() -> None:
    """Names are unique within each collection."""
    service = _service(
        types=[TypeDef(name=Scalar[str](value="Thing")), TypeDef(name=Scalar[str](value="Thing"))]
    )
    errors = validate_service(service)
    assert len(errors) == 1
    assert errors[0].path == "/types"
    assert "Thing" in errors[0].message
    assert format_errors(errors).splitlines()[0] == "Validation errors: 1"
