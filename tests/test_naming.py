"""Unit tests for naming helpers."""

from __future__ import annotations

import pytest

from openapi_to_ir.naming import camel, kebab, pascal, singular, split_words


@pytest.mark.parametrize(
    ("plural", "expected"),
    [
        ("pets", "pet"),
        ("Pets", "Pet"),
        ("categories", "category"),
        ("addresses", "address"),
        ("boxes", "box"),
        ("movies", "movie"),
        ("people", "person"),
        ("status", "status"),
        ("series", "series"),
        ("analyses", "analysis"),
        ("USERS", "USER"),
        ("pet", "pet"),
    ],
)
def test_singular(plural: str, expected: str) -> None:
    """Common English plurals reduce to their singular."""
    assert singular(plural) == expected


def test_split_words_handles_acronyms_and_separators() -> None:
    """Words split on separators, case changes and acronym boundaries."""
    assert split_words("HTTPServer") == ["HTTP", "Server"]
    assert split_words("get_inventory-response") == ["get", "inventory", "response"]
    assert split_words("listPets2") == ["list", "Pets", "2"]


def test_case_conversions() -> None:
    """Camel, pascal and kebab renderings of the same words."""
    assert camel("getInventory_response") == "getInventoryResponse"
    assert camel("Widget_status") == "widgetStatus"
    assert pascal("Swagger petstore") == "SwaggerPetstore"
    assert kebab("codegenRequestBodyName") == "codegen-request-body-name"
    assert kebab("CODEGEN_REQUEST_BODY_NAME") == "codegen-request-body-name"
