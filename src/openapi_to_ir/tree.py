"""Position-annotated document tree built from YAML or JSON text.

Both serializations go through PyYAML's composer: JSON is a subset of the
YAML flow syntax, so one code path yields identical trees for either form.
Only the composed node graph is used; PyYAML's object constructor is applied
to scalars alone, which keeps source order and positions for every node.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import yaml

from .errors import OpenAPIParseError
from .json_types import JSONPrimitive, JSONValue

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_JSON_NUMBER = re.compile(r"^-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?$")


class _DocumentLoader(yaml.SafeLoader):
    """Safe loader that also reads JSON number syntax (``1e5``, ``1.5E3``) as floats."""


# Appended after the YAML 1.1 int resolver, so integral literals stay ints.
_DocumentLoader.add_implicit_resolver(_FLOAT_TAG, _JSON_NUMBER, list("-0123456789"))


class DocumentSyntaxError(OpenAPIParseError):
    """Raised when document text is not well-formed YAML or JSON."""


@dataclass(frozen=True)
class Position:
    """One point in the source text (1-based line/column, 0-based offset)."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class Range:
    """Span of source text covered by a node."""

    start: Position
    end: Position


@dataclass(frozen=True)
class LiteralNode:
    """Scalar value node."""

    value: JSONPrimitive
    range: Range

    @property
    def loc(self) -> str:
        return encode_range(self.range)


@dataclass(frozen=True)
class PropertyNode:
    """One key/value pair of an object node."""

    key: LiteralNode
    value: Node

    @property
    def name(self) -> str:
        return str(self.key.value)

    @property
    def range(self) -> Range:
        return Range(start=self.key.range.start, end=self.value.range.end)


@dataclass(frozen=True)
class ObjectNode:
    """Mapping node with children in document order."""

    children: tuple[PropertyNode, ...]
    range: Range
    _index: dict[str, PropertyNode] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, PropertyNode] = {}
        for child in self.children:
            index.setdefault(child.name, child)
        object.__setattr__(self, "_index", index)

    @property
    def loc(self) -> str:
        return encode_range(self.range)

    @property
    def keys(self) -> list[str]:
        return [child.name for child in self.children]

    def get(self, key: str) -> PropertyNode | None:
        """Return the first property named ``key``."""
        return self._index.get(key)


@dataclass(frozen=True)
class ArrayNode:
    """Sequence node with children in document order."""

    children: tuple[Node, ...]
    range: Range

    @property
    def loc(self) -> str:
        return encode_range(self.range)


type Node = ObjectNode | ArrayNode | LiteralNode


def parse_tree(text: str) -> Node:
    """Parse YAML or JSON text into a position-annotated tree.

    Args:
        text (str): Document text in either serialization.

    Returns:
        Node: Root node of the document.

    Raises:
        DocumentSyntaxError: If the text is malformed or empty.
    """
    if text.lstrip()[:1] in ("{", "[") and "\t" in text:
        # Tabs are only whitespace in JSON, but YAML rejects them as indentation.
        text = text.replace("\t", " ")
    loader = _DocumentLoader(text)
    try:
        root = loader.get_single_node()
        if root is None:
            raise DocumentSyntaxError("Document is empty")
        return _convert(root, loader, active=set())
    except yaml.YAMLError as exc:
        raise DocumentSyntaxError(f"Malformed document: {exc}") from exc
    finally:
        loader.dispose()


def _convert(node: yaml.Node, loader: _DocumentLoader, *, active: set[int]) -> Node:
    node_range = Range(start=_position(node.start_mark), end=_position(node.end_mark))
    if isinstance(node, yaml.ScalarNode):
        return LiteralNode(value=_scalar_value(node, loader), range=node_range)

    # Aliases share node objects; a node reachable from itself cannot be a tree.
    if id(node) in active:
        raise DocumentSyntaxError(
            f"Recursive alias at line {node_range.start.line}, column {node_range.start.column}"
        )
    active.add(id(node))
    try:
        if isinstance(node, yaml.SequenceNode):
            return ArrayNode(
                children=tuple(_convert(item, loader, active=active) for item in node.value),
                range=node_range,
            )
        if isinstance(node, yaml.MappingNode):
            children: list[PropertyNode] = []
            for key_node, value_node in node.value:
                if not isinstance(key_node, yaml.ScalarNode):
                    mark = key_node.start_mark
                    raise DocumentSyntaxError(
                        f"Unsupported complex mapping key at line {mark.line + 1}, "
                        f"column {mark.column + 1}"
                    )
                key = LiteralNode(
                    value=key_node.value,
                    range=Range(
                        start=_position(key_node.start_mark),
                        end=_position(key_node.end_mark),
                    ),
                )
                children.append(
                    PropertyNode(key=key, value=_convert(value_node, loader, active=active))
                )
            return ObjectNode(children=tuple(children), range=node_range)
    finally:
        active.discard(id(node))
    raise DocumentSyntaxError(f"Unsupported YAML node type: {type(node).__name__}")


def _scalar_value(node: yaml.ScalarNode, loader: _DocumentLoader) -> JSONPrimitive:
    if node.tag == _TIMESTAMP_TAG:
        return node.value
    value = loader.construct_object(node)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return node.value


def _position(mark: yaml.Mark) -> Position:
    return Position(line=mark.line + 1, column=mark.column + 1, offset=mark.index)


def encode_range(value: Range) -> str:
    """Render a range as ``line;column;offset;line;column;offset``."""
    start, end = value.start, value.end
    return (
        f"{start.line};{start.column};{start.offset};"
        f"{end.line};{end.column};{end.offset}"
    )


def decode_range(encoded: str | None) -> Range | None:
    """Inverse of :func:`encode_range`; returns ``None`` for empty input."""
    if not encoded:
        return None
    parts = encoded.split(";")
    if len(parts) != 6:
        raise ValueError(f"Malformed encoded range: {encoded!r}")
    numbers = [int(part) for part in parts]
    return Range(
        start=Position(line=numbers[0], column=numbers[1], offset=numbers[2]),
        end=Position(line=numbers[3], column=numbers[4], offset=numbers[5]),
    )


def to_json(node: Node) -> JSONValue:
    """Convert a subtree back into plain JSON-compatible values."""
    if isinstance(node, LiteralNode):
        return node.value
    if isinstance(node, ArrayNode):
        return [to_json(child) for child in node.children]
    return {child.name: to_json(child.value) for child in node.children}
