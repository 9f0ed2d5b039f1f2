
from enum import Enum

from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestTimeoutError,
    ServiceResponseTimeoutError,
)
from loguru import logger
from starlette.concurrency import run_in_threadpool

from ..core.config import settings
from ..core.errors import OcrError


class OcrFailure(str, Enum):
    """Provider failure classes, named after the gRPC status codes."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"
    UNKNOWN = "UNKNOWN"


OCR_FAILURE_MESSAGES = {
    OcrFailure.INVALID_ARGUMENT: "PDF-bestand is beschadigd of ongeldig",
    OcrFailure.RESOURCE_EXHAUSTED: "OCR-quota bereikt. Probeer het later opnieuw.",
    OcrFailure.PERMISSION_DENIED: "Configuratiefout: geen toegang tot Document Intelligence",
    OcrFailure.NOT_FOUND: "Document Intelligence model niet gevonden (configuratiefout)",
    OcrFailure.DEADLINE_EXCEEDED: "PDF verwerking duurt te lang. Probeer een kleiner bestand.",
    OcrFailure.UNKNOWN: OcrError.default_message,
}

_STATUS_FAILURES = {
    400: OcrFailure.INVALID_ARGUMENT,
    415: OcrFailure.INVALID_ARGUMENT,
    429: OcrFailure.RESOURCE_EXHAUSTED,
    401: OcrFailure.PERMISSION_DENIED,
    403: OcrFailure.PERMISSION_DENIED,
    404: OcrFailure.NOT_FOUND,
    408: OcrFailure.DEADLINE_EXCEEDED,
    504: OcrFailure.DEADLINE_EXCEEDED,
}

_ERROR_CODE_FAILURES = {
    "invalidrequest": OcrFailure.INVALID_ARGUMENT,
    "invalidargument": OcrFailure.INVALID_ARGUMENT,
    "invalidcontent": OcrFailure.INVALID_ARGUMENT,
    "invalidcontentlength": OcrFailure.INVALID_ARGUMENT,
    "unsupportedcontent": OcrFailure.INVALID_ARGUMENT,
    "toomanyrequests": OcrFailure.RESOURCE_EXHAUSTED,
    "quotaexceeded": OcrFailure.RESOURCE_EXHAUSTED,
    "unauthorized": OcrFailure.PERMISSION_DENIED,
    "permissiondenied": OcrFailure.PERMISSION_DENIED,
    "forbidden": OcrFailure.PERMISSION_DENIED,
    "notfound": OcrFailure.NOT_FOUND,
    "modelnotfound": OcrFailure.NOT_FOUND,
    "timeout": OcrFailure.DEADLINE_EXCEEDED,
}


def classify_ocr_failure(error: object) -> OcrFailure:
    """
    Work out which kind of provider failure `error` represents.

    Looks at, in order: client timeout exceptions, the Azure error code, the
    HTTP status code, and finally a "CODE: detail" prefix in the message.
    Anything unrecognised, including values that are not exceptions, is
    UNKNOWN.
    """
    if isinstance(error, (ServiceRequestTimeoutError, ServiceResponseTimeoutError)):
        return OcrFailure.DEADLINE_EXCEEDED
    if isinstance(error, ClientAuthenticationError):
        return OcrFailure.PERMISSION_DENIED
    if isinstance(error, ResourceNotFoundError):
        return OcrFailure.NOT_FOUND

    if isinstance(error, HttpResponseError):
        code = getattr(getattr(error, "error", None), "code", None)
        if isinstance(code, str) and code.lower() in _ERROR_CODE_FAILURES:
            return _ERROR_CODE_FAILURES[code.lower()]
        if error.status_code in _STATUS_FAILURES:
            return _STATUS_FAILURES[error.status_code]

    if isinstance(error, Exception):
        prefix = str(error).split(":", 1)[0].strip().upper()
        if prefix in OcrFailure.__members__:
            return OcrFailure[prefix]

    return OcrFailure.UNKNOWN


def describe_ocr_failure(error: object) -> str:
    """Dutch, user-facing message for a provider failure."""
    return OCR_FAILURE_MESSAGES[classify_ocr_failure(error)]


class DocumentOcrClient:
    """Extracts plain text from a PDF with Azure Document Intelligence."""

    def __init__(self, client: DocumentIntelligenceClient | None = None, model_id: str | None = None):
        self._client = client
        self.model_id = model_id or settings.az_di_model

    @property
    def client(self) -> DocumentIntelligenceClient:
        if self._client is None:
            if not settings.ocr_configured:
                raise OcrError("Document Intelligence is niet geconfigureerd")
            self._client = DocumentIntelligenceClient(
                endpoint=settings.az_di_endpoint,
                credential=AzureKeyCredential(settings.az_di_api_key)
            )
        return self._client

    def _analyze(self, file_bytes: bytes) -> str:
        poller = self.client.begin_analyze_document(
            self.model_id,
            body=file_bytes,
            content_type="application/octet-stream"
        )
        result = poller.result()
        return result.content or ""

    async def extract_text(self, file_bytes: bytes) -> str:
        """
        Return the OCR text of a PDF (empty string if none was found).

        The SDK is synchronous, so the call runs in the threadpool.

        Raises:
            OcrError: with a Dutch message describing the failure
        """
        logger.info("Analyzing document", model=self.model_id, size_bytes=len(file_bytes))
        try:
            text = await run_in_threadpool(self._analyze, file_bytes)
        except OcrError:
            raise
        except Exception as e:
            failure = classify_ocr_failure(e)
            logger.error("Document Intelligence extraction failed", failure=failure.value, error=str(e))
            raise OcrError(OCR_FAILURE_MESSAGES[failure]) from e

        logger.info("Text extraction finished", text_length=len(text))
        return text
