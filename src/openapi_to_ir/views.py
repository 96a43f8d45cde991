"""Generic read-only views over object nodes of the document tree.

:class:`Fields` is the single accessor every OpenAPI construct view is built
from: construct views hold a ``Fields`` instance and expose typed properties
that delegate to it. Views never copy the tree; they only interpret it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import SchemaShapeError
from .tree import ArrayNode, LiteralNode, Node, ObjectNode, PropertyNode, encode_range

V = TypeVar("V")

REF_KEY = "$ref"
EXTENSION_PREFIX = "x-"


def describe(node: Node) -> str:
    """Human readable location of a node for error messages."""
    start = node.range.start
    return f"line {start.line}, column {start.column}"


def is_ref(node: Node) -> bool:
    """Return whether a node is a ``{"$ref": "..."}`` object."""
    if not isinstance(node, ObjectNode):
        return False
    prop = node.get(REF_KEY)
    return prop is not None and isinstance(prop.value, LiteralNode)


@dataclass(frozen=True)
class Fields:
    """Typed field access over one object node."""

    node: ObjectNode

    @classmethod
    def of(cls, node: Node, what: str) -> Fields:
        """Wrap ``node``, failing when it is not an object."""
        if not isinstance(node, ObjectNode):
            raise SchemaShapeError(f"Expected an object for {what} at {describe(node)}")
        return cls(node)

    @property
    def loc(self) -> str:
        return self.node.loc

    @property
    def keys(self) -> list[str]:
        return self.node.keys

    def value(self, key: str) -> Node | None:
        prop = self.node.get(key)
        return prop.value if prop is not None else None

    def literal(self, key: str) -> LiteralNode | None:
        """Return the literal at ``key``; absent or non-literal values yield ``None``."""
        value = self.value(key)
        return value if isinstance(value, LiteralNode) else None

    def string(self, key: str) -> LiteralNode | None:
        literal = self.literal(key)
        if literal is not None and isinstance(literal.value, str):
            return literal
        return None

    def number(self, key: str) -> LiteralNode | None:
        literal = self.literal(key)
        if literal is None or isinstance(literal.value, bool):
            return None
        if isinstance(literal.value, (int, float)):
            return literal
        return None

    def require_string(self, key: str, what: str) -> LiteralNode:
        literal = self.string(key)
        if literal is None:
            raise SchemaShapeError(
                f"Missing required string field '{key}' on {what} at {describe(self.node)}"
            )
        return literal

    def child(self, key: str, factory: Callable[[Node], V]) -> V | None:
        value = self.value(key)
        return factory(value) if value is not None else None

    def child_or_ref(
        self,
        key: str,
        factory: Callable[[Node], V],
    ) -> V | RefView | None:
        value = self.value(key)
        if value is None:
            return None
        return or_ref(factory)(value)

    def array(self, key: str, factory: Callable[[Node], V]) -> list[V] | None:
        value = self.value(key)
        if value is None:
            return None
        if not isinstance(value, ArrayNode):
            raise SchemaShapeError(f"Expected an array for '{key}' at {describe(value)}")
        return [factory(item) for item in value.children]

    def literals(self, key: str) -> list[LiteralNode] | None:
        return self.array(key, _as_literal(key))

    def index(self, key: str, factory: Callable[[Node], V]) -> Index[V] | None:
        value = self.value(key)
        if value is None:
            return None
        return Index(fields=Fields.of(value, f"'{key}'"), factory=factory)

    def key_range(self, key: str) -> str | None:
        prop = self.node.get(key)
        return prop.key.loc if prop is not None else None

    def prop_range(self, key: str) -> str | None:
        prop = self.node.get(key)
        return encode_range(prop.range) if prop is not None else None

    def extensions(self) -> list[PropertyNode]:
        return [child for child in self.node.children if child.name.startswith(EXTENSION_PREFIX)]


@dataclass(frozen=True)
class RefView:
    """A node holding a local pointer string."""

    fields: Fields

    @classmethod
    def from_node(cls, node: Node) -> RefView:
        return cls(Fields.of(node, "reference"))

    @property
    def ref(self) -> LiteralNode:
        return self.fields.require_string(REF_KEY, "reference")

    @property
    def pointer(self) -> str:
        return str(self.ref.value)

    @property
    def loc(self) -> str:
        return self.fields.loc


def or_ref(factory: Callable[[Node], V]) -> Callable[[Node], V | RefView]:
    """Wrap a view factory so ``$ref`` nodes become :class:`RefView`."""

    def _build(node: Node) -> V | RefView:
        if is_ref(node):
            return RefView.from_node(node)
        return factory(node)

    return _build


@dataclass(frozen=True)
class Index(Generic[V]):
    """Ordered-key collection; lookup order is document order."""

    fields: Fields
    factory: Callable[[Node], V]

    @property
    def keys(self) -> list[str]:
        return self.fields.keys

    @property
    def loc(self) -> str:
        return self.fields.loc

    def read(self, key: str) -> V | None:
        return self.fields.child(key, self.factory)

    def items(self) -> Iterator[tuple[str, V]]:
        for child in self.fields.node.children:
            yield child.name, self.factory(child.value)

    def key_range(self, key: str) -> str | None:
        return self.fields.key_range(key)

    def prop_range(self, key: str) -> str | None:
        return self.fields.prop_range(key)

    def __len__(self) -> int:
        return len(self.fields.node.children)


def _as_literal(key: str) -> Callable[[Node], LiteralNode]:
    def _build(node: Node) -> LiteralNode:
        if not isinstance(node, LiteralNode):
            raise SchemaShapeError(f"Expected literal items in '{key}' at {describe(node)}")
        return node

    return _build


def literal_node(node: Node) -> LiteralNode:
    """Factory for index entries that must be literals (e.g. scope descriptions)."""
    if not isinstance(node, LiteralNode):
        raise SchemaShapeError(f"Expected a literal value at {describe(node)}")
    return node
