"""Typed views over OpenAPI 3.x constructs.

Each view wraps one object node through :class:`~openapi_to_ir.views.Fields`
and exposes the construct's fields by their Python names. Fields that may be
inline or referenced return either the view or a :class:`RefView`.
"""

from __future__ import annotations

from dataclasses import dataclass

from .classify import (
    SchemaOrRef,
    SecurityScheme,
    schema_or_ref,
    security_scheme_or_ref,
)
from .errors import SchemaShapeError
from .tree import LiteralNode, Node
from .views import Fields, Index, RefView, or_ref

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass(frozen=True)
class ExampleView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> ExampleView:
        return cls(Fields.of(node, "example"))

    @property
    def summary(self) -> LiteralNode | None:
        return self.fields.string("summary")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def value(self) -> Node | None:
        return self.fields.value("value")

    @property
    def external_value(self) -> LiteralNode | None:
        return self.fields.string("externalValue")


@dataclass(frozen=True)
class MediaTypeView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> MediaTypeView:
        return cls(Fields.of(node, "media type"))

    @property
    def schema(self) -> SchemaOrRef | None:
        return self.fields.child("schema", schema_or_ref)

    @property
    def example(self) -> Node | None:
        return self.fields.value("example")

    @property
    def examples(self) -> Index[ExampleView | RefView] | None:
        return self.fields.index("examples", or_ref(ExampleView.from_node))


@dataclass(frozen=True)
class HeaderView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> HeaderView:
        return cls(Fields.of(node, "header"))

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def required(self) -> LiteralNode | None:
        return self.fields.literal("required")

    @property
    def schema(self) -> SchemaOrRef | None:
        return self.fields.child("schema", schema_or_ref)


@dataclass(frozen=True)
class ParameterView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> ParameterView:
        return cls(Fields.of(node, "parameter"))

    @property
    def loc(self) -> str:
        return self.fields.loc

    @property
    def name(self) -> LiteralNode:
        return self.fields.require_string("name", "parameter")

    @property
    def location(self) -> LiteralNode:
        return self.fields.require_string("in", "parameter")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def required(self) -> LiteralNode | None:
        return self.fields.literal("required")

    @property
    def deprecated(self) -> LiteralNode | None:
        return self.fields.literal("deprecated")

    @property
    def style(self) -> LiteralNode | None:
        return self.fields.string("style")

    @property
    def explode(self) -> LiteralNode | None:
        return self.fields.literal("explode")

    @property
    def schema(self) -> SchemaOrRef | None:
        """The parameter schema, falling back to the first ``content`` entry's schema."""
        schema = self.fields.child("schema", schema_or_ref)
        if schema is not None:
            return schema
        content = self.content
        if content is None or not content.keys:
            return None
        media_type = content.read(content.keys[0])
        return media_type.schema if media_type is not None else None

    @property
    def content(self) -> Index[MediaTypeView] | None:
        return self.fields.index("content", MediaTypeView.from_node)


@dataclass(frozen=True)
class RequestBodyView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> RequestBodyView:
        return cls(Fields.of(node, "request body"))

    @property
    def loc(self) -> str:
        return self.fields.loc

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def required(self) -> LiteralNode | None:
        return self.fields.literal("required")

    @property
    def content(self) -> Index[MediaTypeView] | None:
        return self.fields.index("content", MediaTypeView.from_node)


@dataclass(frozen=True)
class LinkView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> LinkView:
        return cls(Fields.of(node, "link"))

    @property
    def operation_ref(self) -> LiteralNode | None:
        return self.fields.string("operationRef")

    @property
    def operation_id(self) -> LiteralNode | None:
        return self.fields.string("operationId")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")


@dataclass(frozen=True)
class ResponseView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> ResponseView:
        return cls(Fields.of(node, "response"))

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def headers(self) -> Index[HeaderView | RefView] | None:
        return self.fields.index("headers", or_ref(HeaderView.from_node))

    @property
    def content(self) -> Index[MediaTypeView] | None:
        return self.fields.index("content", MediaTypeView.from_node)

    @property
    def links(self) -> Index[LinkView | RefView] | None:
        return self.fields.index("links", or_ref(LinkView.from_node))


@dataclass(frozen=True)
class SecurityRequirementView:
    """Scheme name to required scopes."""

    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> SecurityRequirementView:
        return cls(Fields.of(node, "security requirement"))

    @property
    def keys(self) -> list[str]:
        return self.fields.keys

    def scopes(self, key: str) -> list[LiteralNode] | None:
        return self.fields.literals(key)


@dataclass(frozen=True)
class OperationView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> OperationView:
        return cls(Fields.of(node, "operation"))

    @property
    def loc(self) -> str:
        return self.fields.loc

    @property
    def tags(self) -> list[LiteralNode] | None:
        return self.fields.literals("tags")

    @property
    def summary(self) -> LiteralNode | None:
        return self.fields.string("summary")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def operation_id(self) -> LiteralNode | None:
        return self.fields.string("operationId")

    @property
    def parameters(self) -> list[ParameterView | RefView]:
        return self.fields.array("parameters", or_ref(ParameterView.from_node)) or []

    @property
    def request_body(self) -> RequestBodyView | RefView | None:
        return self.fields.child_or_ref("requestBody", RequestBodyView.from_node)

    @property
    def responses(self) -> Index[ResponseView | RefView] | None:
        return self.fields.index("responses", or_ref(ResponseView.from_node))

    @property
    def callbacks(self) -> Index[CallbackView | RefView] | None:
        return self.fields.index("callbacks", or_ref(CallbackView.from_node))

    @property
    def deprecated(self) -> LiteralNode | None:
        return self.fields.literal("deprecated")

    @property
    def security(self) -> list[SecurityRequirementView] | None:
        return self.fields.array("security", SecurityRequirementView.from_node)


@dataclass(frozen=True)
class PathItemView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> PathItemView:
        return cls(Fields.of(node, "path item"))

    @property
    def keys(self) -> list[str]:
        return self.fields.keys

    @property
    def summary(self) -> LiteralNode | None:
        return self.fields.string("summary")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")

    @property
    def parameters(self) -> list[ParameterView | RefView]:
        return self.fields.array("parameters", or_ref(ParameterView.from_node)) or []

    def operations(self) -> list[tuple[str, OperationView]]:
        """HTTP verbs and their operations, in document order."""
        return [
            (key, OperationView.from_node(self.fields.value(key)))
            for key in dict.fromkeys(self.keys)
            if key in HTTP_METHODS
        ]

    def key_range(self, key: str) -> str | None:
        return self.fields.key_range(key)

    def prop_range(self, key: str) -> str | None:
        return self.fields.prop_range(key)


@dataclass(frozen=True)
class CallbackView:
    """Runtime expression to path item."""

    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> CallbackView:
        return cls(Fields.of(node, "callback"))

    @property
    def expressions(self) -> Index[PathItemView | RefView]:
        return Index(fields=self.fields, factory=or_ref(PathItemView.from_node))


@dataclass(frozen=True)
class ComponentsView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> ComponentsView:
        return cls(Fields.of(node, "components"))

    @property
    def schemas(self) -> Index[SchemaOrRef] | None:
        return self.fields.index("schemas", schema_or_ref)

    @property
    def responses(self) -> Index[ResponseView | RefView] | None:
        return self.fields.index("responses", or_ref(ResponseView.from_node))

    @property
    def parameters(self) -> Index[ParameterView | RefView] | None:
        return self.fields.index("parameters", or_ref(ParameterView.from_node))

    @property
    def examples(self) -> Index[ExampleView | RefView] | None:
        return self.fields.index("examples", or_ref(ExampleView.from_node))

    @property
    def request_bodies(self) -> Index[RequestBodyView | RefView] | None:
        return self.fields.index("requestBodies", or_ref(RequestBodyView.from_node))

    @property
    def headers(self) -> Index[HeaderView | RefView] | None:
        return self.fields.index("headers", or_ref(HeaderView.from_node))

    @property
    def security_schemes(self) -> Index[SecurityScheme | RefView] | None:
        return self.fields.index("securitySchemes", security_scheme_or_ref)

    @property
    def links(self) -> Index[LinkView | RefView] | None:
        return self.fields.index("links", or_ref(LinkView.from_node))

    @property
    def callbacks(self) -> Index[CallbackView | RefView] | None:
        return self.fields.index("callbacks", or_ref(CallbackView.from_node))


@dataclass(frozen=True)
class TagView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> TagView:
        return cls(Fields.of(node, "tag"))

    @property
    def name(self) -> LiteralNode:
        return self.fields.require_string("name", "tag")

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")


@dataclass(frozen=True)
class InfoView:
    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> InfoView:
        return cls(Fields.of(node, "info"))

    @property
    def title(self) -> LiteralNode:
        return self.fields.require_string("title", "info")

    @property
    def version(self) -> LiteralNode:
        version = self.fields.literal("version")
        if version is None:
            # Raises with the field named.
            return self.fields.require_string("version", "info")
        return version

    @property
    def description(self) -> LiteralNode | None:
        return self.fields.string("description")


@dataclass(frozen=True)
class OpenAPIView:
    """Root of an OpenAPI 3.x document."""

    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> OpenAPIView:
        return cls(Fields.of(node, "OpenAPI document"))

    @property
    def node(self) -> Node:
        return self.fields.node

    @property
    def loc(self) -> str:
        return self.fields.loc

    @property
    def openapi(self) -> LiteralNode | None:
        return self.fields.literal("openapi")

    @property
    def info(self) -> InfoView:
        info = self.fields.child("info", InfoView.from_node)
        if info is None:
            raise SchemaShapeError("Missing required field 'info' on OpenAPI document")
        return info

    @property
    def paths(self) -> Index[PathItemView | RefView] | None:
        return self.fields.index("paths", or_ref(PathItemView.from_node))

    @property
    def components(self) -> ComponentsView | None:
        return self.fields.child("components", ComponentsView.from_node)

    @property
    def security(self) -> list[SecurityRequirementView] | None:
        return self.fields.array("security", SecurityRequirementView.from_node)

    @property
    def tags(self) -> list[TagView]:
        return self.fields.array("tags", TagView.from_node) or []
