"""OpenAPI document loading and basic validation."""

from __future__ import annotations

import re
from pathlib import Path

from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from .errors import OpenAPIParseError
from .overlay import OpenAPIView
from .tree import Node, ObjectNode, to_json

_MAJOR_VERSION_RE = re.compile(r"^\s*[v=]?\s*(\d+)")
_MIN_MAJOR_VERSION = 3


class OpenAPILoadError(OpenAPIParseError):
    """Raised when a source OpenAPI document cannot be loaded."""


def load_document(path: Path) -> str:
    """Read document text (YAML or JSON) from disk."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise OpenAPILoadError(f"Failed to read OpenAPI file {path}: {exc}") from exc


def parse_major_version(raw: object) -> int | None:
    """Major component of a semantic-version-like value (``"3.0.3"`` -> 3)."""
    if raw is None or isinstance(raw, bool):
        return None
    match = _MAJOR_VERSION_RE.match(str(raw))
    return int(match.group(1)) if match else None


def get_openapi_version(document: OpenAPIView) -> str:
    """Return the declared OpenAPI version string."""
    version = document.openapi
    if version is None or not isinstance(version.value, str) or not version.value.strip():
        raise OpenAPILoadError("Missing or invalid 'openapi' version field")
    return version.value.strip()


def ensure_supported_version(version: str) -> None:
    """Reject documents older than OpenAPI 3."""
    major = parse_major_version(version)
    if major is None or major < _MIN_MAJOR_VERSION:
        raise OpenAPILoadError(f"Unsupported OpenAPI version {version!r}; expected 3.x")


def validate_document(root: Node, source: str = "<document>") -> None:
    """Validate the plain document against the OpenAPI 3 object model."""
    if not isinstance(root, ObjectNode):
        raise OpenAPILoadError(f"OpenAPI document must be a mapping: {source}")
    try:
        OpenAPI.model_validate(to_json(root))
    except ValidationError as exc:
        raise OpenAPILoadError(f"OpenAPI schema validation failed for {source}: {exc}") from exc
