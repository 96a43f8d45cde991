"""OpenAPI 3.x to service IR parser package."""

from __future__ import annotations

from .cli import main
from .model_types import ParseResult, ParserOptions
from .parser import OpenAPIParser, parse_file, parse_service

__all__ = ["OpenAPIParser", "ParseResult", "ParserOptions", "main", "parse_file", "parse_service"]
