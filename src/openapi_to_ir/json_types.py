"""JSON-compatible typing aliases shared across the project."""

from __future__ import annotations

from collections.abc import Mapping

type JSONPrimitive = str | int | float | bool | None
type JSONValue = JSONPrimitive | list[JSONValue] | Mapping[str, JSONValue]
