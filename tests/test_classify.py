"""Unit tests for schema and security-scheme classification."""

from __future__ import annotations

import pytest

from openapi_to_ir.classify import (
    ApiKeySecurityScheme,
    ArraySchema,
    BooleanSchema,
    HttpSecurityScheme,
    NumberSchema,
    OAuth2SecurityScheme,
    ObjectSchema,
    OpenIdConnectSecurityScheme,
    StringSchema,
    classify_schema,
    classify_security_scheme,
    schema_or_ref,
    security_scheme_or_ref,
)
from openapi_to_ir.errors import SchemaShapeError
from openapi_to_ir.tree import parse_tree
from openapi_to_ir.views import RefView


@pytest.mark.parametrize(
    ("text", "variant"),
    [
        ("type: string\n", StringSchema),
        ("type: integer\n", NumberSchema),
        ("type: number\n", NumberSchema),
        ("type: boolean\n", BooleanSchema),
        ("type: array\nitems: {type: string}\n", ArraySchema),
        ("type: object\n", ObjectSchema),
        ("allOf: []\n", ObjectSchema),
    ],
)
def test_schema_variants(text: str, variant: type) -> None:
    """Schemas classify by their ``type`` field; no ``type`` means object."""
    assert isinstance(classify_schema(parse_tree(text)), variant)


def test_unknown_schema_shape_is_fatal() -> None:
    """Schema-valued fields reject unrecognized types."""
    assert classify_schema(parse_tree("type: 'null'\n")) is None
    with pytest.raises(SchemaShapeError):
        schema_or_ref(parse_tree("type: 'null'\n"))


def test_references_are_recognized_before_classification() -> None:
    """A ``$ref`` object becomes a reference view."""
    view = schema_or_ref(parse_tree('{"$ref": "#/components/schemas/Pet"}'))
    assert isinstance(view, RefView)
    assert view.pointer == "#/components/schemas/Pet"


def test_string_schema_fields() -> None:
    """String facets are exposed as literals."""
    schema = classify_schema(
        parse_tree("type: string\nformat: uuid\nmaxLength: 5\nenum: [a, b]\npattern: '^a'\n")
    )
    assert isinstance(schema, StringSchema)
    assert schema.format is not None and schema.format.value == "uuid"
    assert schema.max_length is not None and schema.max_length.value == 5
    assert schema.pattern is not None and schema.pattern.value == "^a"
    assert [item.value for item in schema.enum or []] == ["a", "b"]


def test_object_schema_properties_keep_order() -> None:
    """Properties are an ordered index of schema-or-reference values."""
    schema = classify_schema(
        parse_tree(
            "type: object\n"
            "required: [b]\n"
            "properties:\n"
            "  b: {type: string}\n"
            "  a: {$ref: '#/components/schemas/A'}\n"
        )
    )
    assert isinstance(schema, ObjectSchema)
    assert schema.properties is not None
    assert schema.properties.keys == ["b", "a"]
    assert isinstance(schema.properties.read("a"), RefView)
    assert [item.value for item in schema.required] == ["b"]


def test_composition_keeps_only_object_members() -> None:
    """Composition lists keep object schemas and references only."""
    schema = classify_schema(
        parse_tree(
            "oneOf:\n"
            "  - {$ref: '#/components/schemas/A'}\n"
            "  - {type: string}\n"
            "  - {type: object, properties: {x: {type: integer}}}\n"
        )
    )
    assert isinstance(schema, ObjectSchema)
    members = schema.one_of
    assert members is not None
    assert len(members) == 2
    assert isinstance(members[0], RefView)
    assert isinstance(members[1], ObjectSchema)
    assert schema.all_of is None


def test_additional_properties_literal_or_schema() -> None:
    """``additionalProperties`` is either a literal or a nested schema."""
    forbidden = classify_schema(parse_tree("type: object\nadditionalProperties: false\n"))
    typed = classify_schema(parse_tree("type: object\nadditionalProperties: {type: string}\n"))
    assert isinstance(forbidden, ObjectSchema) and isinstance(typed, ObjectSchema)
    assert getattr(forbidden.additional_properties, "value", None) is False
    assert isinstance(typed.additional_properties, StringSchema)


@pytest.mark.parametrize(
    ("text", "variant"),
    [
        ("type: http\nscheme: basic\n", HttpSecurityScheme),
        ("type: apiKey\nname: key\nin: header\n", ApiKeySecurityScheme),
        ("type: oauth2\nflows: {}\n", OAuth2SecurityScheme),
        ("type: openIdConnect\nopenIdConnectUrl: https://example.com\n", OpenIdConnectSecurityScheme),
    ],
)
def test_security_scheme_variants(text: str, variant: type) -> None:
    """Security schemes classify by their ``type`` field."""
    assert isinstance(classify_security_scheme(parse_tree(text)), variant)


def test_unknown_security_scheme_is_fatal() -> None:
    """Unrecognized security scheme types are rejected."""
    with pytest.raises(SchemaShapeError):
        security_scheme_or_ref(parse_tree("type: mutualTLS\n"))


def test_api_key_scheme_fields() -> None:
    """API key schemes expose the parameter name and location."""
    scheme = classify_security_scheme(parse_tree("type: apiKey\nname: X-Key\nin: query\n"))
    assert isinstance(scheme, ApiKeySecurityScheme)
    assert scheme.name.value == "X-Key"
    assert scheme.location.value == "query"
