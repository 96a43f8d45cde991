"""Convert schema trees into IR types, enums and unions.

:class:`TypeSynthesizer` maps one schema-or-reference plus a naming context
(``local_name`` under ``parent_name``) to a :class:`TypeInfo`, registering any
named entity it discovers along the way. Anonymous shapes are named
``camel(parent_name + "_" + local_name)``; inline enums use the singular of
the local name. Registration only appends: when two entities share a name the
driver keeps the last one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .classify import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    SchemaOrRef,
    StringSchema,
)
from .errors import SchemaShapeError
from .extensions import parse_meta
from .ir import EnumDef, EnumValue, Property, Scalar, TypeDef, TypedValue, UnionDef
from .model_types import TypeInfo
from .naming import camel, singular
from .resolver import Resolver
from .rules import build_object_rules, build_rules
from .scalars import optional_text, primitive
from .tree import LiteralNode
from .views import RefView, describe

logger = logging.getLogger(__name__)

COMPONENT_SCHEMAS_PREFIX = "#/components/schemas/"

_STRING_FORMAT_NAMES = {"date": "date", "date-time": "date-time"}
_NUMBER_FORMAT_NAMES = {
    ("integer", "int32"): "integer",
    ("integer", "int64"): "long",
    ("number", "float"): "float",
    ("number", "double"): "double",
}


def component_schema_name(pointer: str) -> str | None:
    """Name of the component schema a pointer addresses directly, if any."""
    if not pointer.startswith(COMPONENT_SCHEMAS_PREFIX):
        return None
    name = pointer[len(COMPONENT_SCHEMAS_PREFIX) :]
    if not name or "/" in name:
        return None
    return name.replace("~1", "/").replace("~0", "~")


def component_schema_pointer(name: str) -> str:
    return COMPONENT_SCHEMAS_PREFIX + name.replace("~", "~0").replace("/", "~1")


def anonymous_name(parent_name: str, local_name: str) -> str:
    return camel(f"{parent_name}_{local_name}")


def enum_name(parent_name: str, local_name: str) -> str:
    return camel(f"{parent_name}_{singular(local_name)}")


@dataclass
class _SynthesisTables:
    types: list[TypeDef] = field(default_factory=list)
    enums: list[EnumDef] = field(default_factory=list)
    unions: list[UnionDef] = field(default_factory=list)


class TypeSynthesizer:
    """Synthesize IR entities from schemas, sharing one set of name tables."""

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver
        self._tables = _SynthesisTables()

    @property
    def types(self) -> list[TypeDef]:
        """Anonymous types in registration order."""
        return list(self._tables.types)

    @property
    def enums(self) -> list[EnumDef]:
        return list(self._tables.enums)

    @property
    def unions(self) -> list[UnionDef]:
        return list(self._tables.unions)

    def synthesize(
        self,
        schema_or_ref: SchemaOrRef,
        local_name: str,
        parent_name: str,
    ) -> TypeInfo:
        """Describe the type a schema denotes at one use site."""
        if isinstance(schema_or_ref, RefView):
            return self._synthesize_ref(schema_or_ref, local_name, parent_name)
        return self._synthesize_inline(schema_or_ref, local_name, parent_name)

    def _synthesize_ref(self, ref: RefView, local_name: str, parent_name: str) -> TypeInfo:
        pointer = ref.pointer
        schema = self._resolver.resolve_schema(ref)
        rules = tuple(build_rules(self._resolver, schema))
        name = component_schema_name(pointer)
        if name is None:
            # Pointers outside the component schemas are opaque named types.
            return TypeInfo(
                type_name=Scalar[str](value=pointer, loc=self._resolver.ref_range(pointer)),
                is_primitive=False,
                is_array=False,
                rules=rules,
                loc=schema.fields.loc,
            )

        type_name = Scalar[str](value=name, loc=self._resolver.ref_range(pointer))
        if isinstance(schema, ObjectSchema):
            return TypeInfo(
                type_name=type_name,
                is_primitive=False,
                is_array=False,
                rules=rules,
                loc=schema.fields.loc,
            )
        if isinstance(schema, StringSchema) and schema.enum is not None:
            self._register_enum(type_name, schema)
            return TypeInfo(
                type_name=type_name,
                is_primitive=False,
                is_array=False,
                rules=rules,
                loc=schema.fields.loc,
            )
        # Other shapes are synthesized in place; only this path can recurse.
        with self._resolver.guard(pointer):
            return self._synthesize_inline(schema, local_name, parent_name)

    def _synthesize_inline(self, schema: Schema, local_name: str, parent_name: str) -> TypeInfo:
        rules = tuple(build_rules(self._resolver, schema))
        loc = schema.fields.loc

        if isinstance(schema, StringSchema):
            if schema.enum is not None:
                type_name = Scalar[str](value=enum_name(parent_name, local_name))
                self._register_enum(type_name, schema)
                return TypeInfo(
                    type_name=type_name,
                    is_primitive=False,
                    is_array=False,
                    rules=rules,
                    loc=loc,
                )
            return TypeInfo(
                type_name=self._string_name(schema),
                is_primitive=True,
                is_array=False,
                rules=rules,
                default=primitive(schema.default),
                constant=primitive(schema.const),
                loc=loc,
            )

        if isinstance(schema, NumberSchema):
            return TypeInfo(
                type_name=self._number_name(schema),
                is_primitive=True,
                is_array=False,
                rules=rules,
                default=primitive(schema.default),
                constant=primitive(schema.const),
                loc=loc,
            )

        if isinstance(schema, BooleanSchema):
            return TypeInfo(
                type_name=Scalar[str](value=str(schema.type.value), loc=schema.type.loc),
                is_primitive=True,
                is_array=False,
                rules=rules,
                default=primitive(schema.default),
                constant=primitive(schema.const),
                loc=loc,
            )

        if isinstance(schema, ArraySchema):
            items = schema.items
            if items is None:
                raise SchemaShapeError(
                    f"Expected array items but found none in array schema at {describe(schema.fields.node)}"
                )
            item_info = self.synthesize(items, local_name, parent_name)
            return TypeInfo(
                type_name=item_info.type_name,
                is_primitive=item_info.is_primitive,
                is_array=True,
                rules=rules,
                loc=loc,
            )

        type_name = Scalar[str](value=anonymous_name(parent_name, local_name))
        one_of = schema.one_of
        if one_of is not None:
            members = [self._member(member, local_name, parent_name) for member in one_of]
            self._tables.unions.append(
                UnionDef(
                    name=type_name,
                    members=members,
                    loc=loc,
                    meta=parse_meta(schema.fields),
                )
            )
            logger.debug("Synthesized union %s with %d members", type_name.value, len(members))
        else:
            self._tables.types.append(
                TypeDef(
                    name=type_name,
                    description=optional_text(schema.description),
                    properties=self.properties(schema, type_name.value),
                    rules=build_object_rules(schema),
                    loc=loc,
                )
            )
            logger.debug("Synthesized anonymous type %s", type_name.value)
        return TypeInfo(
            type_name=type_name,
            is_primitive=False,
            is_array=False,
            rules=rules,
            loc=loc,
        )

    def _member(
        self,
        member: ObjectSchema | RefView,
        local_name: str,
        parent_name: str,
    ) -> TypedValue:
        info = self.synthesize(member, local_name, parent_name)
        return TypedValue(
            type_name=info.type_name,
            is_primitive=info.is_primitive,
            is_array=info.is_array,
            rules=list(info.rules),
        )

    def properties(
        self,
        schema: ObjectSchema,
        parent_name: str,
        inherited_required: list[LiteralNode] | None = None,
    ) -> list[Property]:
        """Properties of an object schema, merging ``allOf`` branches in order.

        Each branch contributes its own properties, with its ``required`` list
        concatenated onto the requirements passed down from the enclosing
        schema. Properties declared beside ``allOf`` are not read.
        """
        required = [*schema.required, *(inherited_required or [])]
        all_of = schema.all_of
        if all_of is None:
            return self._own_properties(schema, parent_name, required)

        merged: list[Property] = []
        for branch in all_of:
            key = branch.pointer if isinstance(branch, RefView) else f"allOf@{branch.fields.loc}"
            with self._resolver.guard(key):
                resolved = self._resolver.resolve_schema(branch)
                if not isinstance(resolved, ObjectSchema):
                    continue
                merged.extend(self.properties(resolved, parent_name, required))
        return merged

    def _own_properties(
        self,
        schema: ObjectSchema,
        parent_name: str,
        required: list[LiteralNode],
    ) -> list[Property]:
        index = schema.properties
        if index is None:
            return []
        required_names = {str(item.value) for item in required}
        result: list[Property] = []
        for name, prop in index.items():
            resolved = self._resolver.resolve_schema(prop)
            info = self.synthesize(prop, name, parent_name)
            result.append(
                Property(
                    name=Scalar[str](value=name, loc=index.key_range(name)),
                    description=optional_text(resolved.description),
                    type_name=info.type_name,
                    is_primitive=info.is_primitive,
                    is_array=info.is_array,
                    default=info.default if info.is_primitive else None,
                    constant=info.constant if info.is_primitive else None,
                    rules=build_rules(self._resolver, resolved, required=name in required_names),
                    loc=resolved.fields.loc,
                    meta=parse_meta(resolved.fields),
                )
            )
        return result

    def _register_enum(self, name: Scalar[str], schema: StringSchema) -> None:
        values: list[EnumValue] = []
        seen: set[object] = set()
        for item in schema.enum or []:
            marker = (type(item.value), item.value)
            if marker in seen:
                continue
            seen.add(marker)
            values.append(EnumValue(content=primitive(item), loc=item.loc))
        self._tables.enums.append(
            EnumDef(name=name, values=values, loc=schema.fields.prop_range("enum"))
        )
        logger.debug("Synthesized enum %s with %d values", name.value, len(values))

    @staticmethod
    def _string_name(schema: StringSchema) -> Scalar[str]:
        fmt = schema.format
        if fmt is not None and fmt.value in _STRING_FORMAT_NAMES:
            return Scalar[str](value=_STRING_FORMAT_NAMES[str(fmt.value)], loc=schema.fields.loc)
        return Scalar[str](value=str(schema.type.value), loc=schema.type.loc)

    @staticmethod
    def _number_name(schema: NumberSchema) -> Scalar[str]:
        fmt = schema.format
        type_value = str(schema.type.value)
        if fmt is not None:
            narrowed = _NUMBER_FORMAT_NAMES.get((type_value, str(fmt.value)))
            if narrowed is not None:
                return Scalar[str](value=narrowed, loc=schema.fields.loc)
        return Scalar[str](value=type_value, loc=schema.type.loc)
