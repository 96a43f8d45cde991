"""Unit tests for type, enum and union synthesis."""

from __future__ import annotations

import pytest

from openapi_to_ir.classify import ObjectSchema, SchemaOrRef, schema_or_ref
from openapi_to_ir.errors import SchemaShapeError
from openapi_to_ir.resolver import CyclicReferenceError, Resolver
from openapi_to_ir.synthesizer import (
    TypeSynthesizer,
    anonymous_name,
    component_schema_name,
    component_schema_pointer,
    enum_name,
)
from openapi_to_ir.tree import parse_tree

_DOCUMENT = """
components:
  schemas:
    Widget:
      type: object
      required: [status]
      properties:
        status:
          type: string
          enum: [A, B, C, A]
        size:
          type: integer
          format: int64
          default: 3
        made:
          type: string
          format: date
        tags:
          type: array
          items:
            type: string
        dims:
          type: object
          properties:
            width:
              type: number
              format: float
        self:
          $ref: "#/components/schemas/Widget"
    Color:
      type: string
      enum: [red, green]
    Ratio:
      type: number
      format: double
    Base:
      type: object
      required: [id]
      properties:
        id:
          type: string
    Derived:
      allOf:
        - $ref: "#/components/schemas/Base"
        - type: object
          required: [extra]
          properties:
            extra:
              type: boolean
        - type: string
      properties:
        own:
          type: string
    Loop:
      type: array
      items:
        $ref: "#/components/schemas/Loop"
    SelfMix:
      allOf:
        - $ref: "#/components/schemas/SelfMix"
    Shape:
      type: object
      properties:
        kind:
          oneOf:
            - $ref: "#/components/schemas/Base"
            - type: object
              properties:
                side:
                  type: number
    Bare:
      type: array
    Nested:
      type: object
      properties:
        inner:
          type: string
"""


def _setup() -> tuple[Resolver, TypeSynthesizer]:
    resolver = Resolver(parse_tree(_DOCUMENT))
    return resolver, TypeSynthesizer(resolver)


def _component(resolver: Resolver, name: str) -> SchemaOrRef:
    return schema_or_ref(resolver.resolve_pointer(component_schema_pointer(name)))


def _ref(pointer: str) -> SchemaOrRef:
    return schema_or_ref(parse_tree(f'{{"$ref": "{pointer}"}}'))


def test_naming_helpers() -> None:
    """Anonymous and enum names combine the parent and local names."""
    assert anonymous_name("getInventory", "response") == "getInventoryResponse"
    assert enum_name("Widget", "statuses") == "widgetStatus"
    assert component_schema_name("#/components/schemas/Pet") == "Pet"
    assert component_schema_name("#/components/schemas/a~1b") == "a/b"
    assert component_schema_name("#/components/schemas/Pet/properties/id") is None
    assert component_schema_pointer("a/b") == "#/components/schemas/a~1b"


def test_inline_enum_property_registers_enum() -> None:
    """An inline string enum becomes a named enum with distinct located values."""
    resolver, synthesizer = _setup()
    widget = resolver.resolve_schema(_component(resolver, "Widget"))
    assert isinstance(widget, ObjectSchema)

    properties = synthesizer.properties(widget, "Widget")
    status = properties[0]
    assert status.name.value == "status"
    assert status.type_name.value == "widgetStatus"
    assert status.is_primitive is False
    assert [rule.id for rule in status.rules] == ["required", "string-enum"]

    [enum] = synthesizer.enums
    assert enum.name.value == "widgetStatus"
    assert [value.content.value for value in enum.values] == ["A", "B", "C"]
    assert all(value.loc for value in enum.values)


def test_primitive_narrowing_and_defaults() -> None:
    """Formats narrow primitive names and primitive defaults are carried."""
    resolver, synthesizer = _setup()
    widget = resolver.resolve_schema(_component(resolver, "Widget"))
    assert isinstance(widget, ObjectSchema)
    by_name = {prop.name.value: prop for prop in synthesizer.properties(widget, "Widget")}

    assert by_name["size"].type_name.value == "long"
    assert by_name["size"].default is not None and by_name["size"].default.value == 3
    assert by_name["made"].type_name.value == "date"
    assert by_name["tags"].type_name.value == "string"
    assert by_name["tags"].is_array is True
    assert by_name["tags"].is_primitive is True


def test_anonymous_object_registers_type() -> None:
    """An inline object property becomes a type named after its parent and key."""
    resolver, synthesizer = _setup()
    widget = resolver.resolve_schema(_component(resolver, "Widget"))
    assert isinstance(widget, ObjectSchema)
    by_name = {prop.name.value: prop for prop in synthesizer.properties(widget, "Widget")}

    assert by_name["dims"].type_name.value == "widgetDims"
    [dims] = synthesizer.types
    assert dims.name.value == "widgetDims"
    assert [(prop.name.value, prop.type_name.value) for prop in dims.properties] == [
        ("width", "float")
    ]


def test_self_reference_resolves_by_name() -> None:
    """An object referring to itself is named, not expanded."""
    resolver, synthesizer = _setup()
    widget = resolver.resolve_schema(_component(resolver, "Widget"))
    assert isinstance(widget, ObjectSchema)
    by_name = {prop.name.value: prop for prop in synthesizer.properties(widget, "Widget")}
    assert by_name["self"].type_name.value == "Widget"
    assert by_name["self"].type_name.loc is not None


def test_referenced_string_enum_uses_component_name() -> None:
    """A referenced enum component is registered under its own name."""
    _, synthesizer = _setup()
    info = synthesizer.synthesize(_ref("#/components/schemas/Color"), "color", "Paint")
    assert info.type_name.value == "Color"
    assert info.is_primitive is False
    assert [enum.name.value for enum in synthesizer.enums] == ["Color"]


def test_referenced_primitive_is_inlined() -> None:
    """A referenced non-object, non-enum component synthesizes as its primitive."""
    _, synthesizer = _setup()
    info = synthesizer.synthesize(_ref("#/components/schemas/Ratio"), "ratio", "Paint")
    assert info.type_name.value == "double"
    assert info.is_primitive is True


def test_non_component_pointer_is_opaque() -> None:
    """Pointers deeper than a component schema name the type by the pointer."""
    _, synthesizer = _setup()
    pointer = "#/components/schemas/Nested/properties/inner"
    info = synthesizer.synthesize(_ref(pointer), "inner", "Other")
    assert info.type_name.value == pointer
    assert info.is_primitive is False


def test_all_of_merges_only_branch_properties() -> None:
    """Branch properties are merged in order; properties beside ``allOf`` are ignored."""
    resolver, synthesizer = _setup()
    derived = resolver.resolve_schema(_component(resolver, "Derived"))
    assert isinstance(derived, ObjectSchema)

    properties = synthesizer.properties(derived, "Derived")
    assert [prop.name.value for prop in properties] == ["id", "extra"]
    required = {prop.name.value for prop in properties if any(r.id == "required" for r in prop.rules)}
    assert required == {"id", "extra"}


def test_inline_one_of_registers_union() -> None:
    """An inline ``oneOf`` becomes a union of its object members."""
    resolver, synthesizer = _setup()
    shape = resolver.resolve_schema(_component(resolver, "Shape"))
    assert isinstance(shape, ObjectSchema)

    [kind] = synthesizer.properties(shape, "Shape")
    assert kind.type_name.value == "shapeKind"
    [union] = synthesizer.unions
    assert union.name.value == "shapeKind"
    assert [member.type_name.value for member in union.members] == ["Base", "shapeKind"]
    assert [item.name.value for item in synthesizer.types] == ["shapeKind"]


def test_array_without_items_is_fatal() -> None:
    """Arrays must declare their items."""
    resolver, synthesizer = _setup()
    with pytest.raises(SchemaShapeError):
        synthesizer.synthesize(_component(resolver, "Bare"), "bare", "Root")


def test_self_nested_array_is_cyclic() -> None:
    """An array whose items are itself cannot be expanded."""
    _, synthesizer = _setup()
    with pytest.raises(CyclicReferenceError):
        synthesizer.synthesize(_ref("#/components/schemas/Loop"), "loop", "Root")


def test_self_inheriting_all_of_is_cyclic() -> None:
    """An ``allOf`` branch that refers back to its own schema is a cycle."""
    resolver, synthesizer = _setup()
    with resolver.guard(component_schema_pointer("SelfMix")):
        schema = resolver.resolve_schema(_component(resolver, "SelfMix"))
        assert isinstance(schema, ObjectSchema)
        with pytest.raises(CyclicReferenceError):
            synthesizer.properties(schema, "SelfMix")
