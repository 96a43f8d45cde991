"""Internal datatypes for one parse pass."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ir import Scalar, Service, ValidationRule, Violation
from .json_types import JSONPrimitive
from .overlay import OperationView, PathItemView
from .resolver import DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class ParserOptions:
    """Settings for a parse pass."""

    source_path: str = ""
    max_depth: int = DEFAULT_MAX_DEPTH
    strict: bool = False


@dataclass(frozen=True)
class TypeInfo:
    """What a schema-or-reference synthesizes to at one use site."""

    type_name: Scalar[str]
    is_primitive: bool
    is_array: bool
    rules: tuple[ValidationRule, ...] = ()
    default: Scalar[JSONPrimitive] | None = None
    constant: Scalar[JSONPrimitive] | None = None
    loc: str | None = None


@dataclass(frozen=True)
class OperationRef:
    """One operation located in the ``paths`` traversal."""

    path: str
    verb: str
    path_item: PathItemView
    operation: OperationView


@dataclass(frozen=True)
class ParseResult:
    """IR plus the non-fatal diagnostics recorded while building it."""

    service: Service
    violations: tuple[Violation, ...] = field(default_factory=tuple)
