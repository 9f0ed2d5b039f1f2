"""
Pytest configuration and shared fixtures.

Registers the integration marker/option and provides invoice field data plus
fake collaborators for the HTTP tests.
"""

import copy

import pytest

from factuurcheck.models.fields import ExtractedFields


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real Azure / LLM resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Azure / LLM resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


COMPLETE_FIELDS = {
    "factuurnummer": {"found": True, "value": "INV-001"},
    "factuurdatum": {"found": True, "value": "2025-01-15"},
    "leverancierNaam": {"found": True, "value": "Test BV"},
    "btwNummer": {"found": True, "value": "NL123456789B01"},
    "klantNaam": {"found": True, "value": "Klant BV"},
    "totaalbedrag": {"found": True, "value": "€1000"},
    "kvkNummer": {"found": True, "value": "12345678"},
    "leverancierAdres": {
        "found": True, "street": "Teststraat", "houseNumber": "1",
        "postalCode": "1234AB", "city": "Amsterdam", "complete": True,
    },
    "klantAdres": {
        "found": True, "street": "Klantweg", "houseNumber": "2",
        "postalCode": "5678CD", "city": "Rotterdam", "complete": True,
    },
    "omschrijving": {"found": True, "value": "Consulting diensten, 10 uur"},
    "leveringsdatum": {"found": True, "value": "2025-01-10"},
    "bedragExclBtw": {"found": True, "value": "€826.45"},
    "btwTarief": {"found": True, "value": "21%"},
    "btwBedrag": {"found": True, "value": "€173.55"},
}


@pytest.fixture
def fields_data():
    """Fresh copy of a fully compliant LLM reply (JSON shape)"""
    return copy.deepcopy(COMPLETE_FIELDS)


@pytest.fixture
def make_fields(fields_data):
    """Build ExtractedFields from the complete reply with per-key overrides"""
    def _make(**overrides):
        return ExtractedFields.model_validate({**fields_data, **overrides})
    return _make
