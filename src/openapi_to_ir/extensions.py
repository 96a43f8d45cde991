"""``x-`` extension fields as IR metadata."""

from __future__ import annotations

from typing import Any

from .ir import MetaValue, Scalar
from .naming import kebab
from .tree import to_json
from .views import EXTENSION_PREFIX, Fields

BODY_NAME_EXTENSION = "codegen-request-body-name"


def parse_meta(fields: Fields) -> list[MetaValue] | None:
    """Return extensions re-keyed without their prefix, or ``None`` when there are none."""
    meta = [
        MetaValue(
            key=Scalar[str](value=prop.name[len(EXTENSION_PREFIX) :], loc=prop.key.loc),
            value=Scalar[Any](value=to_json(prop.value), loc=prop.value.loc),
        )
        for prop in fields.extensions()
    ]
    return meta or None


def body_name_override(meta: list[MetaValue] | None) -> Scalar[str] | None:
    """The request body parameter name from ``x-codegen-request-body-name`` (any casing)."""
    for item in meta or []:
        if kebab(item.key.value) != BODY_NAME_EXTENSION:
            continue
        if isinstance(item.value.value, str):
            return Scalar[str](value=item.value.value, loc=item.value.loc)
        return None
    return None
