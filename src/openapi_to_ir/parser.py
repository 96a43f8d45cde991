"""Pipeline driver: document text in, IR service plus violations out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

from .classify import ObjectSchema
from .diagnostics import Diagnostics
from .errors import SchemaShapeError
from .extensions import parse_meta
from .interfaces import HttpProjection
from .ir import EnumDef, Scalar, Service, TypeDef, UnionDef
from .loader import (
    ensure_supported_version,
    get_openapi_version,
    load_document,
    parse_major_version,
    validate_document,
)
from .model_types import ParseResult, ParserOptions
from .naming import pascal
from .overlay import OpenAPIView
from .resolver import DEFAULT_MAX_DEPTH, Resolver
from .rules import build_object_rules
from .scalars import optional_text
from .synthesizer import TypeSynthesizer, component_schema_pointer
from .tree import parse_tree

logger = logging.getLogger(__name__)

NamedT = TypeVar("NamedT", TypeDef, EnumDef, UnionDef)


def fold_by_name(items: list[NamedT]) -> list[NamedT]:
    """Keep one entry per name: the last value, at the first entry's position."""
    by_name: dict[str, NamedT] = {}
    for item in items:
        by_name[item.name.value] = item
    return list(by_name.values())


class OpenAPIParser:
    """Parse one OpenAPI 3.x document into a :class:`~openapi_to_ir.ir.Service`."""

    def __init__(self, text: str, options: ParserOptions | None = None) -> None:
        self._options = options or ParserOptions()
        root = parse_tree(text)
        if self._options.strict:
            validate_document(root, self._options.source_path or "<document>")
        self._document = OpenAPIView.from_node(root)
        ensure_supported_version(get_openapi_version(self._document))

    def parse(self) -> ParseResult:
        """Run one synthesis pass over the document."""
        document = self._document
        resolver = Resolver(document.node, max_depth=self._options.max_depth)
        diagnostics = Diagnostics(self._options.source_path)
        synthesizer = TypeSynthesizer(resolver)

        interfaces = HttpProjection(document, resolver, synthesizer, diagnostics).interfaces()
        definitions = self._definitions(resolver, synthesizer)

        info = document.info
        major = parse_major_version(info.version.value)
        if major is None:
            raise SchemaShapeError(
                f"Cannot parse a major version from info.version {info.version.value!r}"
            )

        service = Service(
            source_path=self._options.source_path,
            title=Scalar[str](value=pascal(str(info.title.value)), loc=info.title.loc),
            major_version=Scalar[int](value=major, loc=info.version.loc),
            interfaces=interfaces,
            types=fold_by_name([*definitions, *synthesizer.types]),
            enums=fold_by_name(synthesizer.enums),
            unions=fold_by_name(synthesizer.unions),
            loc=document.loc,
            meta=parse_meta(document.fields),
        )
        logger.debug(
            "Parsed %s: %d interfaces, %d types, %d enums, %d unions, %d violations",
            self._options.source_path or "<document>",
            len(service.interfaces),
            len(service.types),
            len(service.enums),
            len(service.unions),
            len(diagnostics),
        )
        return ParseResult(service=service, violations=diagnostics.violations)

    def _definitions(self, resolver: Resolver, synthesizer: TypeSynthesizer) -> list[TypeDef]:
        """Named types for object-shaped component schemas."""
        components = self._document.components
        schemas = components.schemas if components is not None else None
        if schemas is None:
            return []

        definitions: list[TypeDef] = []
        for name in dict.fromkeys(schemas.keys):
            schema_or_ref = schemas.read(name)
            if schema_or_ref is None:
                continue
            with resolver.guard(component_schema_pointer(name)):
                schema = resolver.resolve_schema(schema_or_ref)
                if not isinstance(schema, ObjectSchema):
                    continue
                definitions.append(
                    TypeDef(
                        name=Scalar[str](value=name, loc=schemas.key_range(name)),
                        description=optional_text(schema.description),
                        properties=synthesizer.properties(schema, name),
                        rules=build_object_rules(schema),
                        loc=schemas.prop_range(name),
                        meta=parse_meta(schema.fields),
                    )
                )
            logger.debug("Synthesized definition %s", name)
        return definitions


def parse_service(text: str, options: ParserOptions | None = None) -> ParseResult:
    """Parse document text (YAML or JSON)."""
    return OpenAPIParser(text, options).parse()


def parse_file(
    path: Path,
    *,
    strict: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ParseResult:
    """Load and parse a document from disk."""
    options = ParserOptions(source_path=str(path), strict=strict, max_depth=max_depth)
    return parse_service(load_document(path), options)
