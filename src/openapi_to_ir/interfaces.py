"""Interfaces, methods and HTTP bindings from the ``paths`` object.

Operations are visited in document order (paths outer, verbs inner) and
grouped into interfaces by the singular of their first tag, or of the first
path segment when untagged. Each operation is synthesized once; its method
and its HTTP binding share the same body and parameter list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .classify import ArraySchema, SchemaOrRef
from .diagnostics import Diagnostics
from .errors import SchemaShapeError
from .extensions import body_name_override, parse_meta
from .ir import (
    HttpMethod,
    HttpParameter,
    HttpPath,
    Interface,
    MetaValue,
    Method,
    Parameter,
    Protocols,
    ReturnType,
    Scalar,
)
from .model_types import OperationRef
from .naming import singular
from .overlay import (
    MediaTypeView,
    OpenAPIView,
    OperationView,
    ParameterView,
    PathItemView,
    RequestBodyView,
    ResponseView,
)
from .resolver import Resolver
from .rules import build_rules
from .scalars import description, flag, optional_text, text
from .security import SecurityProjection
from .synthesizer import TypeSynthesizer
from .tree import LiteralNode
from .views import Index, RefView, describe

logger = logging.getLogger(__name__)

UNNAMED_METHOD = "UNNAMED"
UNKNOWN_HTTP_METHOD = "unknown"
DEFAULT_BODY_NAME = "body"
COMPONENT_RESPONSES_PREFIX = "#/components/responses/"

_ARRAY_LOCATIONS = frozenset({"header", "path", "query"})
_ARRAY_STYLES = {
    "simple": "csv",
    "spaceDelimited": "ssv",
    "pipeDelimited": "pipes",
}
_UNSUPPORTED_STYLES = frozenset({"matrix", "label"})
_DEFAULT_SUCCESS_CODES = {"delete": 202, "options": 204, "post": 201}


@dataclass
class _InterfaceGroup:
    source_name: str
    methods: list[Method] = field(default_factory=list)
    paths: dict[str, list[HttpMethod]] = field(default_factory=dict)


@dataclass(frozen=True)
class _ResolvedParameter:
    view: ParameterView
    schema_or_ref: SchemaOrRef


class HttpProjection:
    """Build interfaces with their methods and HTTP bindings."""

    def __init__(
        self,
        document: OpenAPIView,
        resolver: Resolver,
        synthesizer: TypeSynthesizer,
        diagnostics: Diagnostics,
    ) -> None:
        self._document = document
        self._resolver = resolver
        self._synthesizer = synthesizer
        self._diagnostics = diagnostics
        self._security = SecurityProjection(document, resolver)

    def operations(self) -> Iterator[OperationRef]:
        """All operations in document order."""
        paths = self._document.paths
        if paths is None:
            return
        for path in dict.fromkeys(paths.keys):
            item = paths.read(path)
            if item is None:
                continue
            path_item = self._resolver.resolve(item, PathItemView.from_node)
            for verb, operation in path_item.operations():
                yield OperationRef(path=path, verb=verb, path_item=path_item, operation=operation)

    def interfaces(self) -> list[Interface]:
        groups: dict[str, _InterfaceGroup] = {}
        paths = self._document.paths

        for ref in self.operations():
            source_name = interface_source_name(ref.path, ref.operation)
            key = singular(source_name)
            group = groups.get(key)
            if group is None:
                group = groups[key] = _InterfaceGroup(source_name=source_name)

            method, http_method = self._operation(ref)
            group.methods.append(method)
            group.paths.setdefault(ref.path, []).append(http_method)

        interfaces = [
            Interface(
                name=Scalar[str](value=key),
                description=self._tag_description(group.source_name),
                methods=group.methods,
                protocols=Protocols(
                    http=[
                        HttpPath(
                            path=Scalar[str](value=path, loc=paths.key_range(path)),
                            methods=methods,
                            loc=paths.prop_range(path),
                        )
                        for path, methods in group.paths.items()
                    ]
                ),
            )
            for key, group in groups.items()
        ]
        logger.debug("Found %d interfaces", len(interfaces))
        return interfaces

    def _tag_description(self, name: str) -> Scalar[str] | None:
        for tag in self._document.tags:
            if tag.name.value == name:
                return optional_text(tag.description)
        return None

    def _operation(self, ref: OperationRef) -> tuple[Method, HttpMethod]:
        operation = ref.operation
        operation_id = operation.operation_id
        method_name = str(operation_id.value) if operation_id is not None else ""
        name_loc = operation_id.loc if operation_id is not None else None
        name = Scalar[str](value=method_name or UNNAMED_METHOD, loc=name_loc)
        loc = ref.path_item.prop_range(ref.verb)
        meta = parse_meta(operation.fields)

        body = self._request_body(operation, method_name, meta)
        parameters: list[Parameter] = [body] if body is not None else []
        http_parameters: list[HttpParameter] = []
        if body is not None:
            http_parameters.append(
                HttpParameter(name=body.name, in_=Scalar[str](value="body"), loc=body.loc)
            )

        for resolved in self._parameters(ref.path_item, operation):
            parameters.append(self._parameter(resolved, method_name))
            http_parameters.append(self._http_parameter(resolved))

        method = Method(
            name=name,
            description=description(operation.summary, operation.description),
            parameters=parameters,
            security=self._security.options(operation),
            return_type=self._return_type(operation, method_name),
            deprecated=flag(operation.deprecated),
            loc=loc,
            meta=meta,
        )
        http_method = HttpMethod(
            name=Scalar[str](value=method_name or UNKNOWN_HTTP_METHOD, loc=name_loc),
            verb=Scalar[str](value=ref.verb, loc=ref.path_item.key_range(ref.verb)),
            parameters=http_parameters,
            success_code=self._success_code(ref.verb, operation),
            loc=loc,
        )
        return method, http_method

    def _parameters(
        self,
        path_item: PathItemView,
        operation: OperationView,
    ) -> Iterator[_ResolvedParameter]:
        """Path-level then operation-level parameters, without cookie parameters."""
        for item in [*path_item.parameters, *operation.parameters]:
            view = self._resolver.resolve(item, ParameterView.from_node)
            location = view.location
            if location.value == "cookie":
                self._diagnostics.unsupported(
                    "Cookie is not yet supported. This parameter will be ignored.",
                    location.loc,
                )
                continue
            schema_or_ref = view.schema
            if schema_or_ref is None:
                raise SchemaShapeError(
                    f"Parameter '{view.name.value}' has no schema at {describe(view.fields.node)}"
                )
            yield _ResolvedParameter(view=view, schema_or_ref=schema_or_ref)

    def _parameter(self, resolved: _ResolvedParameter, method_name: str) -> Parameter:
        view = resolved.view
        schema = self._resolver.resolve_schema(resolved.schema_or_ref)
        info = self._synthesizer.synthesize(resolved.schema_or_ref, str(view.name.value), method_name)
        return Parameter(
            name=text(view.name),
            description=optional_text(view.description),
            type_name=info.type_name,
            is_primitive=info.is_primitive,
            is_array=info.is_array,
            default=info.default if info.is_primitive else None,
            constant=info.constant if info.is_primitive else None,
            rules=build_rules(self._resolver, schema, required=_truthy(view.required)),
            loc=view.loc,
            meta=parse_meta(view.fields),
        )

    def _http_parameter(self, resolved: _ResolvedParameter) -> HttpParameter:
        view = resolved.view
        array: Scalar[str] | None = None
        if view.location.value in _ARRAY_LOCATIONS:
            schema = self._resolver.resolve_schema(resolved.schema_or_ref)
            if isinstance(schema, ArraySchema):
                array = self._array_style(view)
        return HttpParameter(
            name=text(view.name),
            in_=text(view.location),
            array=array,
            loc=view.loc,
        )

    def _array_style(self, view: ParameterView) -> Scalar[str]:
        style = view.style
        if style is None:
            return Scalar[str](value="csv")
        value = str(style.value)
        if value in _UNSUPPORTED_STYLES:
            self._diagnostics.unsupported(
                f"Parameter style '{value}' is not yet supported. "
                "The default 'csv' array style will be used instead.",
                style.loc,
            )
            return Scalar[str](value="csv", loc=style.loc)
        if value == "form":
            return Scalar[str](value="multi" if _truthy(view.explode) else "csv", loc=style.loc)
        return Scalar[str](value=_ARRAY_STYLES.get(value, "csv"), loc=style.loc)

    def _request_body(
        self,
        operation: OperationView,
        method_name: str,
        meta: list[MetaValue] | None,
    ) -> Parameter | None:
        body_or_ref = operation.request_body
        if body_or_ref is None:
            return None
        body = self._resolver.resolve(body_or_ref, RequestBodyView.from_node)
        schema_or_ref = self._first_schema(body.content)
        if schema_or_ref is None:
            return None

        name = body_name_override(meta) or Scalar[str](value=DEFAULT_BODY_NAME)
        schema = self._resolver.resolve_schema(schema_or_ref)
        info = self._synthesizer.synthesize(schema_or_ref, name.value, method_name)
        return Parameter(
            name=name,
            description=optional_text(body.description),
            type_name=info.type_name,
            is_primitive=info.is_primitive,
            is_array=info.is_array,
            rules=build_rules(self._resolver, schema, required=_truthy(body.required)),
            loc=body.loc,
            meta=parse_meta(body.fields),
        )

    def _first_schema(self, content: Index[MediaTypeView] | None) -> SchemaOrRef | None:
        """Schema of the first media type; later media types are reported and ignored."""
        if content is None or not content.keys:
            return None
        if len(content.keys) > 1:
            self._diagnostics.unsupported(
                "Multiple content types are not yet supported. The first content type "
                "will be used and all following content types will be ignored.",
                content.loc,
            )
        media_type = content.read(content.keys[0])
        return media_type.schema if media_type is not None else None

    def _return_type(self, operation: OperationView, method_name: str) -> ReturnType | None:
        primary = primary_response_key(operation)
        responses = operation.responses
        if primary is None or responses is None:
            return None
        success = responses.read(primary[0])
        if success is None:
            return None

        response = self._resolver.resolve(success, ResponseView.from_node)
        schema_or_ref = self._first_schema(response.content)
        if schema_or_ref is None:
            return None

        parent_name = _component_response_name(success) or method_name
        info = self._synthesizer.synthesize(schema_or_ref, "response", parent_name)
        return ReturnType(
            type_name=info.type_name,
            is_primitive=info.is_primitive,
            is_array=info.is_array,
            rules=list(info.rules),
            loc=info.loc,
        )

    def _success_code(self, verb: str, operation: OperationView) -> Scalar[int]:
        primary = primary_response_key(operation)
        if primary is None:
            return Scalar[int](value=200)
        key, loc = primary
        if key != "default":
            return Scalar[int](value=int(key), loc=loc)

        responses = operation.responses
        success = responses.read(key) if responses is not None else None
        if success is not None:
            response = self._resolver.resolve(success, ResponseView.from_node)
            content = response.content
            if content is not None and content.keys:
                return Scalar[int](value=_DEFAULT_SUCCESS_CODES.get(verb, 200), loc=loc)
        return Scalar[int](value=204, loc=loc)


def interface_source_name(path: str, operation: OperationView) -> str:
    """First tag of the operation, else the first path segment."""
    tags = operation.tags
    if tags:
        return str(tags[0].value)
    segments = path.split("/")
    return segments[1] if len(segments) > 1 else segments[0]


def primary_response_key(operation: OperationView) -> tuple[str, str | None] | None:
    """The response key that defines success: the first ``2xx`` key, else ``default``.

    Returns the key and the encoded range of that key. A first ``2``-prefixed
    key that is not numeric (``2XX``) defers to ``default``.
    """
    responses = operation.responses
    if responses is None:
        return None
    keys = list(dict.fromkeys(responses.keys))
    code = next((key for key in keys if key.startswith("2")), None)
    if code is not None and _is_status_code(code):
        return code, responses.key_range(code)
    if "default" in keys:
        return "default", responses.key_range("default")
    return None


def _is_status_code(key: str) -> bool:
    try:
        int(key)
    except ValueError:
        return False
    return True


def _component_response_name(success: ResponseView | RefView) -> str | None:
    if not isinstance(success, RefView):
        return None
    pointer = success.pointer
    if not pointer.startswith(COMPONENT_RESPONSES_PREFIX):
        return None
    return pointer[len(COMPONENT_RESPONSES_PREFIX) :] or None


def _truthy(node: LiteralNode | None) -> bool:
    return node is not None and bool(node.value)
