"""Shared helpers for fixture-driven tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import pytest

from openapi_to_ir.model_types import ParseResult
from openapi_to_ir.parser import parse_file

_FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "openapi_specs"
_P = ParamSpec("_P")
_R = TypeVar("_R")


def fixture_dir() -> Path:
    """Return the OpenAPI fixtures directory."""
    return _FIXTURE_DIR


def fixture_file(name: str) -> Path:
    """Return the path of one named fixture."""
    return _FIXTURE_DIR / name


def iter_fixture_paths() -> list[Path]:
    """Return all YAML and JSON fixture paths sorted by name."""
    paths = (
        sorted(_FIXTURE_DIR.glob("*.yaml"))
        + sorted(_FIXTURE_DIR.glob("*.yml"))
        + sorted(_FIXTURE_DIR.glob("*.json"))
    )
    return [path for path in paths if path.is_file()]


def parametrize_fixtures() -> Callable[[Callable[_P, _R]], Callable[_P, _R]]:
    """Parametrize a test over all fixture paths."""

    def _decorator(func: Callable[_P, _R]) -> Callable[_P, _R]:
        decorator: Callable[[Callable[_P, _R]], Callable[_P, _R]]
        decorator = pytest.mark.parametrize(
            "fixture_path",
            iter_fixture_paths(),
            ids=lambda path: path.name,
        )
        return decorator(func)

    return _decorator


def parse_fixture(name: str) -> ParseResult:
    """Parse one named fixture."""
    return parse_file(fixture_file(name))


def strip_locations(value: Any) -> Any:
    """Drop every ``loc``/``range`` entry and the source path from dumped IR."""
    if isinstance(value, dict):
        return {
            key: strip_locations(item)
            for key, item in value.items()
            if key not in {"loc", "range", "sourcePath"}
        }
    if isinstance(value, list):
        return [strip_locations(item) for item in value]
    return value
