"""Unit tests for validation rule synthesis."""

from __future__ import annotations

from openapi_to_ir.classify import Schema, classify_schema
from openapi_to_ir.ir import (
    ArrayUniqueItemsRule,
    NumberGteRule,
    NumberGtRule,
    NumberLteRule,
    NumberLtRule,
    RequiredRule,
    StringEnumRule,
)
from openapi_to_ir.resolver import Resolver
from openapi_to_ir.rules import build_object_rules, build_rules
from openapi_to_ir.tree import parse_tree

_COMPONENTS = """
components:
  schemas:
    Code:
      type: string
      minLength: 3
"""


def _rules(text: str, *, required: bool = False) -> list:
    schema = classify_schema(parse_tree(text))
    assert schema is not None
    return build_rules(Resolver(parse_tree(_COMPONENTS)), schema, required=required)


def _ids(rules: list) -> list[str]:
    return [rule.id for rule in rules]


def _object_schema(text: str) -> Schema:
    schema = classify_schema(parse_tree(text))
    assert schema is not None
    return schema


def test_string_rules_in_factory_order() -> None:
    """String facets produce enum, format, length and pattern rules in that order."""
    rules = _rules(
        "type: string\n"
        "pattern: '^[a-z]+$'\n"
        "minLength: 1\n"
        "maxLength: 8\n"
        "format: hostname\n"
        "enum: [a, b]\n"
    )
    assert _ids(rules) == [
        "string-enum",
        "string-format",
        "string-max-length",
        "string-min-length",
        "string-pattern",
    ]
    assert isinstance(rules[0], StringEnumRule)
    assert [value.value for value in rules[0].values] == ["a", "b"]
    assert all(rule.loc for rule in rules)


def test_required_rule_comes_first() -> None:
    """A required field carries the required rule ahead of its own rules."""
    rules = _rules("type: string\nmaxLength: 4\n", required=True)
    assert isinstance(rules[0], RequiredRule)
    assert _ids(rules) == ["required", "string-max-length"]


def test_inclusive_bounds() -> None:
    """Minimum and maximum are inclusive by default."""
    rules = _rules("type: integer\nminimum: 1\nmaximum: 9\nmultipleOf: 2\n")
    assert _ids(rules) == ["number-multiple-of", "number-gte", "number-lte"]
    assert isinstance(rules[1], NumberGteRule) and rules[1].value.value == 1
    assert isinstance(rules[2], NumberLteRule) and rules[2].value.value == 9


def test_exclusive_minimum_makes_both_bounds_exclusive() -> None:
    """Exclusivity of both bounds is read from ``exclusiveMinimum``."""
    rules = _rules("type: number\nminimum: 0\nexclusiveMinimum: true\nmaximum: 10\n")
    assert isinstance(rules[0], NumberGtRule)
    assert isinstance(rules[1], NumberLtRule)


def test_exclusive_maximum_alone_keeps_inclusive_bounds() -> None:
    """``exclusiveMaximum`` does not change the upper bound rule."""
    rules = _rules("type: number\nmaximum: 10\nexclusiveMaximum: true\n")
    assert isinstance(rules[0], NumberLteRule)


def test_array_rules_include_item_rules() -> None:
    """Array rules are followed by the rules of the resolved item schema."""
    rules = _rules(
        "type: array\n"
        "maxItems: 3\n"
        "minItems: 1\n"
        "uniqueItems: true\n"
        "items: {$ref: '#/components/schemas/Code'}\n"
    )
    assert _ids(rules) == [
        "array-max-items",
        "array-min-items",
        "array-unique-items",
        "string-min-length",
    ]
    assert isinstance(rules[2], ArrayUniqueItemsRule)


def test_unique_items_false_has_no_rule() -> None:
    """``uniqueItems: false`` produces nothing."""
    assert _rules("type: array\nuniqueItems: false\nitems: {type: string}\n") == []


def test_object_rules() -> None:
    """Object property counts and a literal ``false`` produce object rules."""
    rules = build_object_rules(
        _object_schema(
            "type: object\nmaxProperties: 5\nminProperties: 1\nadditionalProperties: false\n"
        )
    )
    assert _ids(rules) == [
        "object-max-properties",
        "object-min-properties",
        "object-additional-properties-forbidden",
    ]


def test_additional_properties_schema_is_not_a_rule() -> None:
    """A schema-valued or ``true`` ``additionalProperties`` forbids nothing."""
    typed = _object_schema("type: object\nadditionalProperties: {type: string}\n")
    allowed = _object_schema("type: object\nadditionalProperties: true\n")
    assert build_object_rules(typed) == []
    assert build_object_rules(allowed) == []
