"""
Tests for Document Intelligence text extraction and failure messages.

The Azure SDK client is replaced by a Mock matching its interface.
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ServiceResponseTimeoutError,
)

from factuurcheck.core.errors import OcrError
from factuurcheck.services.document_ocr import (
    DocumentOcrClient,
    OcrFailure,
    classify_ocr_failure,
    describe_ocr_failure,
)

GENERIC_MESSAGE = "Kan PDF niet verwerken. Controleer of het bestand geldig is."


def http_error(status_code: int, message: str = "error") -> HttpResponseError:
    error = HttpResponseError(message=message)
    error.status_code = status_code
    return error


@pytest.fixture
def sdk_client():
    return Mock()


@pytest.fixture
def ocr(sdk_client):
    return DocumentOcrClient(client=sdk_client, model_id="prebuilt-read")


class TestExtractText:
    @pytest.mark.asyncio
    async def test_returns_document_content(self, ocr, sdk_client):
        sdk_client.begin_analyze_document.return_value.result.return_value = SimpleNamespace(
            content="Factuurnummer: INV-001\nDatum: 2025-01-15"
        )

        text = await ocr.extract_text(b"%PDF-1.4 fake")

        assert text == "Factuurnummer: INV-001\nDatum: 2025-01-15"
        sdk_client.begin_analyze_document.assert_called_once_with(
            "prebuilt-read", body=b"%PDF-1.4 fake", content_type="application/octet-stream"
        )

    @pytest.mark.asyncio
    async def test_missing_content_is_empty_text(self, ocr, sdk_client):
        sdk_client.begin_analyze_document.return_value.result.return_value = SimpleNamespace(content=None)

        assert await ocr.extract_text(b"%PDF-1.4 fake") == ""

    @pytest.mark.asyncio
    async def test_provider_error_becomes_dutch_message(self, ocr, sdk_client):
        sdk_client.begin_analyze_document.side_effect = http_error(429, "Quota exceeded")

        with pytest.raises(OcrError, match="OCR-quota bereikt. Probeer het later opnieuw."):
            await ocr.extract_text(b"%PDF-1.4 fake")

    @pytest.mark.asyncio
    async def test_unknown_error_gets_generic_message(self, ocr, sdk_client):
        sdk_client.begin_analyze_document.side_effect = RuntimeError("UNKNOWN: Something went wrong")

        with pytest.raises(OcrError) as exc_info:
            await ocr.extract_text(b"%PDF-1.4 fake")

        assert str(exc_info.value) == GENERIC_MESSAGE

    @pytest.mark.asyncio
    async def test_not_configured(self, monkeypatch):
        from factuurcheck.core.config import settings
        monkeypatch.setattr(settings, "az_di_endpoint", None)
        monkeypatch.setattr(settings, "az_di_api_key", None)

        with pytest.raises(OcrError, match="niet geconfigureerd"):
            await DocumentOcrClient().extract_text(b"%PDF-1.4 fake")


class TestFailureMessages:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (http_error(400), "PDF-bestand is beschadigd of ongeldig"),
            (http_error(429), "OCR-quota bereikt. Probeer het later opnieuw."),
            (http_error(403), "Configuratiefout: geen toegang tot Document Intelligence"),
            (http_error(404), "Document Intelligence model niet gevonden (configuratiefout)"),
            (http_error(504), "PDF verwerking duurt te lang. Probeer een kleiner bestand."),
            (http_error(500), GENERIC_MESSAGE),
        ],
    )
    def test_http_status_mapping(self, error, expected):
        assert describe_ocr_failure(error) == expected

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("INVALID_ARGUMENT: Malformed request", OcrFailure.INVALID_ARGUMENT),
            ("RESOURCE_EXHAUSTED: Quota exceeded", OcrFailure.RESOURCE_EXHAUSTED),
            ("PERMISSION_DENIED: Access denied", OcrFailure.PERMISSION_DENIED),
            ("NOT_FOUND: Processor not found", OcrFailure.NOT_FOUND),
            ("DEADLINE_EXCEEDED", OcrFailure.DEADLINE_EXCEEDED),
            ("UNKNOWN: Something went wrong", OcrFailure.UNKNOWN),
        ],
    )
    def test_status_code_prefix_in_message(self, message, expected):
        assert classify_ocr_failure(Exception(message)) == expected

    def test_client_timeout(self):
        assert classify_ocr_failure(ServiceResponseTimeoutError("read timed out")) == OcrFailure.DEADLINE_EXCEEDED

    def test_authentication_error(self):
        assert classify_ocr_failure(ClientAuthenticationError("bad key")) == OcrFailure.PERMISSION_DENIED

    def test_azure_error_code_wins_over_status(self):
        error = http_error(500)
        error.error = SimpleNamespace(code="InvalidContent")
        assert classify_ocr_failure(error) == OcrFailure.INVALID_ARGUMENT

    def test_non_exception_values(self):
        assert describe_ocr_failure("String error") == GENERIC_MESSAGE
        assert describe_ocr_failure(None) == GENERIC_MESSAGE
