"""Fixture-based OpenAPI validation and parsing tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import pytest
import yaml
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from openapi_to_ir.parser import parse_file
from openapi_to_ir.validate import format_errors, validate_service

from .fixture_helpers import fixture_dir, parametrize_fixtures


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        pytest.fail(f"Failed to parse YAML in {path}: {exc}")
    except OSError as exc:
        pytest.fail(f"Failed to read fixture {path}: {exc}")

    if not isinstance(data, dict):
        pytest.fail(f"Fixture {path} must parse to a mapping, got {type(data)!r}")

    return cast(dict[str, Any], data)


def test_fixture_directory_exists() -> None:
    """Ensure the fixtures directory is present."""
    assert fixture_dir().is_dir(), f"Fixture directory not found: {fixture_dir()}"


@parametrize_fixtures()
def test_fixture_is_valid_openapi(fixture_path: Path) -> None:
    """Validate each fixture using openapi-python-client's OpenAPI schema model."""
    data = _load_yaml(fixture_path)
    try:
        OpenAPI.model_validate(data)
    except ValidationError as exc:
        pytest.fail(f"OpenAPI validation failed for {fixture_path}:\n{exc}")


@parametrize_fixtures()
def test_fixture_parses_in_strict_mode(fixture_path: Path) -> None:
    """Every fixture parses with document validation enabled."""
    result = parse_file(fixture_path, strict=True)
    assert result.service.source_path == str(fixture_path)
    assert result.service.interfaces


@parametrize_fixtures()
def test_fixture_service_passes_structural_validation(fixture_path: Path) -> None:
    """Produced IR conforms to its schema, is closed over type names and has unique names."""
    result = parse_file(fixture_path)
    errors = validate_service(result.service)
    assert not errors, format_errors(errors)
