"""Conversion of document literals into located IR scalars."""

from __future__ import annotations


from .ir import Number, Primitive, Scalar
from .tree import LiteralNode


def text(node: LiteralNode) -> Scalar[str]:
    return Scalar[str](value=str(node.value), loc=node.loc)


def optional_text(node: LiteralNode | None) -> Scalar[str] | None:
    return text(node) if node is not None else None


def primitive(node: LiteralNode | None) -> Scalar[Primitive] | None:
    if node is None:
        return None
    return Scalar[Primitive](value=node.value, loc=node.loc)


def number(node: LiteralNode) -> Scalar[Number]:
    value = node.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a numeric literal, got {value!r}")
    return Scalar[Number](value=value, loc=node.loc)


def flag(node: LiteralNode | None) -> Scalar[bool] | None:
    if node is None or not isinstance(node.value, bool):
        return None
    return Scalar[bool](value=node.value, loc=node.loc)


def description(
    summary: LiteralNode | None,
    detail: LiteralNode | None,
) -> Scalar[str] | list[Scalar[str]] | None:
    """Summary and description as one scalar, a pair, or nothing."""
    if summary is not None and detail is not None:
        return [text(summary), text(detail)]
    if summary is not None:
        return text(summary)
    if detail is not None:
        return text(detail)
    return None
