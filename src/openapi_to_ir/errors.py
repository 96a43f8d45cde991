"""Fatal error types shared across the parsing pipeline."""

from __future__ import annotations


class OpenAPIParseError(RuntimeError):
    """Base class for failures that abort parsing of a document."""


class SchemaShapeError(OpenAPIParseError):
    """Raised when a node does not have the shape the pipeline requires."""
