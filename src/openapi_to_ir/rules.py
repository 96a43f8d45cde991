"""Validation rule synthesis.

Each factory inspects one schema field and returns a rule or ``None``. The
factory lists are applied in order; factories are independent of each other.
"""

from __future__ import annotations

from collections.abc import Callable

from .classify import ArraySchema, NumberSchema, ObjectSchema, Schema, StringSchema
from .ir import (
    ArrayMaxItemsRule,
    ArrayMinItemsRule,
    ArrayUniqueItemsRule,
    NumberGteRule,
    NumberGtRule,
    NumberLteRule,
    NumberLtRule,
    NumberMultipleOfRule,
    ObjectAdditionalPropertiesRule,
    ObjectMaxPropertiesRule,
    ObjectMinPropertiesRule,
    ObjectValidationRule,
    RequiredRule,
    StringEnumRule,
    StringFormatRule,
    StringMaxLengthRule,
    StringMinLengthRule,
    StringPatternRule,
    ValidationRule,
)
from .resolver import Resolver
from .scalars import number, primitive, text

type RuleFactory = Callable[[Schema], ValidationRule | None]
type ObjectRuleFactory = Callable[[Schema], ObjectValidationRule | None]


def string_enum_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, StringSchema) or schema.enum is None:
        return None
    values = [primitive(item) for item in schema.enum]
    return StringEnumRule(
        values=[value for value in values if value is not None],
        loc=schema.fields.prop_range("enum"),
    )


def string_format_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, StringSchema) or schema.format is None:
        return None
    return StringFormatRule(format=text(schema.format), loc=schema.fields.prop_range("format"))


def string_max_length_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, StringSchema) or schema.max_length is None:
        return None
    return StringMaxLengthRule(
        length=number(schema.max_length),
        loc=schema.fields.prop_range("maxLength"),
    )


def string_min_length_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, StringSchema) or schema.min_length is None:
        return None
    return StringMinLengthRule(
        length=number(schema.min_length),
        loc=schema.fields.prop_range("minLength"),
    )


def string_pattern_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, StringSchema) or schema.pattern is None:
        return None
    return StringPatternRule(pattern=text(schema.pattern), loc=schema.fields.prop_range("pattern"))


def number_multiple_of_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, NumberSchema) or schema.multiple_of is None:
        return None
    return NumberMultipleOfRule(
        value=number(schema.multiple_of),
        loc=schema.fields.prop_range("multipleOf"),
    )


def _exclusive_minimum(schema: NumberSchema) -> bool:
    flag = schema.exclusive_minimum
    return flag is not None and bool(flag.value)


def number_greater_than_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, NumberSchema) or schema.minimum is None:
        return None
    value = number(schema.minimum)
    loc = schema.fields.prop_range("minimum")
    if _exclusive_minimum(schema):
        return NumberGtRule(value=value, loc=loc)
    return NumberGteRule(value=value, loc=loc)


def number_less_than_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, NumberSchema) or schema.maximum is None:
        return None
    value = number(schema.maximum)
    loc = schema.fields.prop_range("maximum")
    # Exclusivity is read from exclusiveMinimum, not exclusiveMaximum.
    if _exclusive_minimum(schema):
        return NumberLtRule(value=value, loc=loc)
    return NumberLteRule(value=value, loc=loc)


def array_max_items_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, ArraySchema) or schema.max_items is None:
        return None
    return ArrayMaxItemsRule(max=number(schema.max_items), loc=schema.fields.prop_range("maxItems"))


def array_min_items_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, ArraySchema) or schema.min_items is None:
        return None
    return ArrayMinItemsRule(min=number(schema.min_items), loc=schema.fields.prop_range("minItems"))


def array_unique_items_rule(schema: Schema) -> ValidationRule | None:
    if not isinstance(schema, ArraySchema):
        return None
    unique = schema.unique_items
    if unique is None or not unique.value:
        return None
    return ArrayUniqueItemsRule(loc=schema.fields.prop_range("uniqueItems"))


def object_max_properties_rule(schema: Schema) -> ObjectValidationRule | None:
    if not isinstance(schema, ObjectSchema) or schema.max_properties is None:
        return None
    return ObjectMaxPropertiesRule(
        max=number(schema.max_properties),
        loc=schema.fields.prop_range("maxProperties"),
    )


def object_min_properties_rule(schema: Schema) -> ObjectValidationRule | None:
    if not isinstance(schema, ObjectSchema) or schema.min_properties is None:
        return None
    return ObjectMinPropertiesRule(
        min=number(schema.min_properties),
        loc=schema.fields.prop_range("minProperties"),
    )


def object_additional_properties_rule(schema: Schema) -> ObjectValidationRule | None:
    if not isinstance(schema, ObjectSchema):
        return None
    # A schema-valued additionalProperties describes values; only a literal false forbids.
    literal = schema.fields.literal("additionalProperties")
    if literal is None or literal.value is not False:
        return None
    return ObjectAdditionalPropertiesRule(loc=schema.fields.prop_range("additionalProperties"))


RULE_FACTORIES: tuple[RuleFactory, ...] = (
    string_enum_rule,
    string_format_rule,
    string_max_length_rule,
    string_min_length_rule,
    string_pattern_rule,
    number_multiple_of_rule,
    number_greater_than_rule,
    number_less_than_rule,
    array_max_items_rule,
    array_min_items_rule,
    array_unique_items_rule,
)

OBJECT_RULE_FACTORIES: tuple[ObjectRuleFactory, ...] = (
    object_max_properties_rule,
    object_min_properties_rule,
    object_additional_properties_rule,
)


def _apply(schema: Schema) -> list[ValidationRule]:
    return [rule for factory in RULE_FACTORIES if (rule := factory(schema)) is not None]


def build_rules(
    resolver: Resolver,
    schema: Schema | None,
    *,
    required: bool = False,
) -> list[ValidationRule]:
    """Rules for a field: ``required`` first, then the schema's own, then its items'."""
    rules: list[ValidationRule] = [RequiredRule()] if required else []
    if schema is None:
        return rules
    rules.extend(_apply(schema))
    if isinstance(schema, ArraySchema):
        items = schema.items
        if items is not None:
            rules.extend(_apply(resolver.resolve_schema(items)))
    return rules


def build_object_rules(schema: Schema) -> list[ObjectValidationRule]:
    return [rule for factory in OBJECT_RULE_FACTORIES if (rule := factory(schema)) is not None]
