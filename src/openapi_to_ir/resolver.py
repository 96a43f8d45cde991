"""Local pointer resolution against the document root."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from .classify import (
    Schema,
    SchemaOrRef,
    SecurityScheme,
    classify_schema,
    classify_security_scheme,
)
from .errors import OpenAPIParseError, SchemaShapeError
from .tree import Node, ObjectNode
from .views import RefView, describe, is_ref

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 64


class ResolveError(OpenAPIParseError):
    """Raised when resolving OpenAPI references fails."""


class UnresolvedReferenceError(ResolveError):
    """Raised when a pointer does not address a node of the document."""


class CyclicReferenceError(ResolveError):
    """Raised when a reference or composition chain loops or nests too deeply."""


def _segments(pointer: str) -> list[str]:
    if not pointer.startswith("#"):
        raise UnresolvedReferenceError(f"Only local references are currently supported: {pointer}")
    body = pointer[1:]
    if not body:
        return []
    if not body.startswith("/"):
        raise UnresolvedReferenceError(f"Unresolvable reference: {pointer}")
    return [token.replace("~1", "/").replace("~0", "~") for token in body[1:].split("/")]


class Resolver:
    """Resolve local references within one parsed document."""

    def __init__(self, root: Node, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._root = root
        self._max_depth = max_depth
        self._stack: list[str] = []

    def resolve_pointer(self, pointer: str) -> Node:
        """Return the node addressed by ``pointer`` without following further references."""
        node = self._root
        for token in _segments(pointer):
            if not isinstance(node, ObjectNode):
                raise UnresolvedReferenceError(f"Unresolvable reference: {pointer}")
            prop = node.get(token)
            if prop is None:
                raise UnresolvedReferenceError(f"Unresolvable reference: {pointer}")
            node = prop.value
        return node

    def ref_range(self, pointer: str) -> str:
        """Encoded range of the key a pointer ends on (the root's range for ``#``)."""
        node = self._root
        loc = node.loc
        for token in _segments(pointer):
            if not isinstance(node, ObjectNode):
                raise UnresolvedReferenceError(f"Unresolvable reference: {pointer}")
            prop = node.get(token)
            if prop is None:
                raise UnresolvedReferenceError(f"Unresolvable reference: {pointer}")
            node = prop.value
            loc = prop.key.loc
        return loc

    def target(self, ref: RefView) -> Node:
        """Follow a reference, and any reference it lands on, to a concrete node."""
        seen: list[str] = []
        pointer = ref.pointer
        while True:
            if pointer in seen:
                chain = " -> ".join([*seen, pointer])
                raise CyclicReferenceError(f"Cyclic reference chain: {chain}")
            seen.append(pointer)
            node = self.resolve_pointer(pointer)
            if not is_ref(node):
                return node
            pointer = RefView.from_node(node).pointer

    def resolve(self, item_or_ref: T | RefView, factory: Callable[[Node], T]) -> T:
        """Return ``item_or_ref`` itself, or the view built over its reference target."""
        if not isinstance(item_or_ref, RefView):
            return item_or_ref
        node = self.target(item_or_ref)
        if not isinstance(node, ObjectNode):
            raise SchemaShapeError(
                f"Reference '{item_or_ref.pointer}' does not address an object ({describe(node)})"
            )
        return factory(node)

    def resolve_schema(self, schema_or_ref: SchemaOrRef) -> Schema:
        """Return the classified schema a schema-or-reference stands for."""
        if not isinstance(schema_or_ref, RefView):
            return schema_or_ref
        node = self.target(schema_or_ref)
        schema = classify_schema(node)
        if schema is None:
            raise SchemaShapeError(
                f"Cannot resolve reference '{schema_or_ref.pointer}' to a schema ({describe(node)})"
            )
        return schema

    def resolve_security_scheme(
        self,
        scheme_or_ref: SecurityScheme | RefView,
    ) -> SecurityScheme:
        if not isinstance(scheme_or_ref, RefView):
            return scheme_or_ref
        node = self.target(scheme_or_ref)
        scheme = classify_security_scheme(node)
        if scheme is None:
            raise SchemaShapeError(
                f"Cannot resolve reference '{scheme_or_ref.pointer}' to a security scheme"
            )
        return scheme

    @contextmanager
    def guard(self, key: str) -> Iterator[None]:
        """Track one level of recursive resolution, failing on loops and runaway depth."""
        if key in self._stack:
            chain = " -> ".join([*self._stack, key])
            raise CyclicReferenceError(f"Cyclic reference chain: {chain}")
        if len(self._stack) >= self._max_depth:
            raise CyclicReferenceError(
                f"Reference nesting exceeds the maximum depth of {self._max_depth} at {key}"
            )
        self._stack.append(key)
        try:
            yield
        finally:
            self._stack.pop()
