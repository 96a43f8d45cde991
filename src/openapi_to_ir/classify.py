"""Schema and security-scheme classification.

A schema node is classified once, by its ``type`` field, into one of five
closed variants; a security scheme into one of four. Everything downstream
matches on the returned variant instead of re-reading ``type``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import SchemaShapeError
from .tree import LiteralNode, Node, ObjectNode
from .views import Fields, Index, RefView, describe, is_ref, literal_node


@dataclass(frozen=True)
class StringSchema:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "string schema")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def default(self) -> LiteralNode | None:
        return self.fields.literal("default")

    @property
    def const(self) -> LiteralNode | None:
        return self.fields.literal("const")

    @property
    def min_length(self) -> LiteralNode | None:
        return self.fields.number("minLength")

    @property
    def max_length(self) -> LiteralNode | None:
        return self.fields.number("maxLength")

    @property
    def pattern(self) -> LiteralNode | None:
        return self.fields.string("pattern")

    @property
    def format(self) -> LiteralNode | None:
        return self.fields.string("format")

    @property
    def enum(self) -> list[LiteralNode] | None:
        return self.fields.literals("enum")


@dataclass(frozen=True)
class NumberSchema:
    """``integer`` and ``number`` schemas."""

    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "number schema")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def default(self) -> LiteralNode | None:
        return self.fields.literal("default")

    @property
    def const(self) -> LiteralNode | None:
        return self.fields.literal("const")

    @property
    def format(self) -> LiteralNode | None:
        return self.fields.string("format")

    @property
    def multiple_of(self) -> LiteralNode | None:
        return self.fields.number("multipleOf")

    @property
    def minimum(self) -> LiteralNode | None:
        return self.fields.number("minimum")

    @property
    def exclusive_minimum(self) -> LiteralNode | None:
        return self.fields.literal("exclusiveMinimum")

    @property
    def maximum(self) -> LiteralNode | None:
        return self.fields.number("maximum")

    @property
    def exclusive_maximum(self) -> LiteralNode | None:
        return self.fields.literal("exclusiveMaximum")


@dataclass(frozen=True)
class BooleanSchema:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "boolean schema")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def default(self) -> LiteralNode | None:
        return self.fields.literal("default")

    @property
    def const(self) -> LiteralNode | None:
        return self.fields.literal("const")


@dataclass(frozen=True)
class ArraySchema:
    fields: Fields

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def items(self) -> SchemaOrRef | None:
        return self.fields.child("items", schema_or_ref)

    @property
    def min_items(self) -> LiteralNode | None:
        return self.fields.number("minItems")

    @property
    def max_items(self) -> LiteralNode | None:
        return self.fields.number("maxItems")

    @property
    def unique_items(self) -> LiteralNode | None:
        return self.fields.literal("uniqueItems")


@dataclass(frozen=True)
class ObjectSchema:
    """Explicit ``object`` schemas and composition (``allOf``/``oneOf``/``anyOf``) nodes."""

    fields: Fields

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def required(self) -> list[LiteralNode]:
        return self.fields.literals("required") or []

    @property
    def properties(self) -> Index[SchemaOrRef] | None:
        return self.fields.index("properties", schema_or_ref)

    @property
    def all_of(self) -> list[ObjectSchema | RefView] | None:
        return self._composition("allOf")

    @property
    def one_of(self) -> list[ObjectSchema | RefView] | None:
        return self._composition("oneOf")

    @property
    def any_of(self) -> list[ObjectSchema | RefView] | None:
        return self._composition("anyOf")

    @property
    def min_properties(self) -> LiteralNode | None:
        return self.fields.number("minProperties")

    @property
    def max_properties(self) -> LiteralNode | None:
        return self.fields.number("maxProperties")

    @property
    def additional_properties(self) -> LiteralNode | SchemaOrRef | None:
        value = self.fields.value("additionalProperties")
        if value is None or isinstance(value, LiteralNode):
            return value
        return schema_or_ref(value)

    def _composition(self, key: str) -> list[ObjectSchema | RefView] | None:
        members = self.fields.array(key, _composition_member)
        if members is None:
            return None
        # Non-object alternatives are not representable as members.
        return [member for member in members if member is not None]


def _composition_member(node: Node) -> ObjectSchema | RefView | None:
    if is_ref(node):
        return RefView.from_node(node)
    schema = classify_schema(node)
    return schema if isinstance(schema, ObjectSchema) else None


type Schema = StringSchema | NumberSchema | BooleanSchema | ArraySchema | ObjectSchema
type SchemaOrRef = Schema | RefView

_SCHEMA_VARIANTS: dict[str, type[Schema]] = {
    "string": StringSchema,
    "integer": NumberSchema,
    "number": NumberSchema,
    "boolean": BooleanSchema,
    "array": ArraySchema,
    "object": ObjectSchema,
}


def classify_schema(node: Node) -> Schema | None:
    """Classify a schema node, or return ``None`` when it has no recognized shape."""
    if not isinstance(node, ObjectNode):
        return None
    prop = node.get("type")
    if prop is None:
        return ObjectSchema(Fields(node))
    if not isinstance(prop.value, LiteralNode) or not isinstance(prop.value.value, str):
        return None
    variant = _SCHEMA_VARIANTS.get(prop.value.value)
    if variant is None:
        return None
    return variant(Fields(node))


def schema_or_ref(node: Node) -> SchemaOrRef:
    """Factory for schema-valued fields; unrecognized shapes are fatal."""
    if is_ref(node):
        return RefView.from_node(node)
    schema = classify_schema(node)
    if schema is None:
        raise SchemaShapeError(f"Unknown schema definition at {describe(node)}")
    return schema


@dataclass(frozen=True)
class OAuthFlow:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> OAuthFlow:
        return cls(Fields.of(node, "OAuth flow"))

    @property
    def authorization_url(self) -> LiteralNode | None:
        return self.fields.string("authorizationUrl")

    @property
    def token_url(self) -> LiteralNode | None:
        return self.fields.string("tokenUrl")

    @property
    def refresh_url(self) -> LiteralNode | None:
        return self.fields.string("refreshUrl")

    @property
    def scopes(self) -> Index[LiteralNode] | None:
        return self.fields.index("scopes", literal_node)


@dataclass(frozen=True)
class OAuthFlows:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> OAuthFlows:
        return cls(Fields.of(node, "OAuth flows"))

    @property
    def implicit(self) -> OAuthFlow | None:
        return self.fields.child("implicit", OAuthFlow.from_node)

    @property
    def password(self) -> OAuthFlow | None:
        return self.fields.child("password", OAuthFlow.from_node)

    @property
    def client_credentials(self) -> OAuthFlow | None:
        return self.fields.child("clientCredentials", OAuthFlow.from_node)

    @property
    def authorization_code(self) -> OAuthFlow | None:
        return self.fields.child("authorizationCode", OAuthFlow.from_node)


@dataclass(frozen=True)
class HttpSecurityScheme:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "security scheme")

    @property
    def scheme(self) -> LiteralNode | None:
        return self.fields.string("scheme")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")


@dataclass(frozen=True)
class ApiKeySecurityScheme:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "security scheme")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def name(self) -> LiteralNode:
        return self.fields.require_string("name", "apiKey security scheme")

    @property
    def location(self) -> LiteralNode:
        return self.fields.require_string("in", "apiKey security scheme")


@dataclass(frozen=True)
class OAuth2SecurityScheme:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "security scheme")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def flows(self) -> OAuthFlows | None:
        return self.fields.child("flows", OAuthFlows.from_node)


@dataclass(frozen=True)
class OpenIdConnectSecurityScheme:
    fields: Fields

    @property
    def type(self) -> LiteralNode:
        return self.fields.require_string("type", "security scheme")

    @property
    def open_id_connect_url(self) -> LiteralNode | None:
        return self.fields.string("openIdConnectUrl")


type SecurityScheme = (
    HttpSecurityScheme
    | ApiKeySecurityScheme
    | OAuth2SecurityScheme
    | OpenIdConnectSecurityScheme
)

_SECURITY_VARIANTS: dict[str, type[SecurityScheme]] = {
    "http": HttpSecurityScheme,
    "apiKey": ApiKeySecurityScheme,
    "oauth2": OAuth2SecurityScheme,
    "openIdConnect": OpenIdConnectSecurityScheme,
}


def classify_security_scheme(node: Node) -> SecurityScheme | None:
    """Classify a security scheme node by its ``type`` field."""
    if not isinstance(node, ObjectNode):
        return None
    prop = node.get("type")
    if prop is None or not isinstance(prop.value, LiteralNode):
        return None
    variant = _SECURITY_VARIANTS.get(str(prop.value.value))
    if variant is None:
        return None
    return variant(Fields(node))


def security_scheme_or_ref(node: Node) -> SecurityScheme | RefView:
    if is_ref(node):
        return RefView.from_node(node)
    scheme = classify_security_scheme(node)
    if scheme is None:
        raise SchemaShapeError(f"Unknown security scheme type at {describe(node)}")
    return scheme

