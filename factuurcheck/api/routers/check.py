from datetime import datetime, UTC

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from ..deps import get_field_extractor, get_ocr_client, get_rate_limiter
from ...core.config import settings
from ...core.errors import GENERIC_ERROR_MESSAGE
from ...services.compliance import calculate_compliance
from ...services.document_ocr import DocumentOcrClient
from ...services.field_extractor import FieldExtractionClient
from ...services.rate_limit import RateLimiterBase, get_rate_limit_headers

router = APIRouter(prefix="/api", tags=["check"])

PDF_CONTENT_TYPE = "application/pdf"


def client_identifier(request: Request) -> str:
    """First address in X-Forwarded-For, or "anonymous"."""
    forwarded_for = request.headers.get("x-forwarded-for", "")
    first = forwarded_for.split(",")[0].strip()
    return first or "anonymous"


def error_response(status_code: int, message: str, headers: dict[str, str], **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra}, headers=headers)


@router.post("/check")
async def check_invoice(
    request: Request,
    limiter: RateLimiterBase = Depends(get_rate_limiter),
    ocr: DocumentOcrClient = Depends(get_ocr_client),
    extractor: FieldExtractionClient = Depends(get_field_extractor),
):
    """
    Check an uploaded PDF invoice against the Dutch invoice requirements.

    Flow: rate limit -> upload validation -> OCR -> LLM field extraction ->
    compliance scoring. Every response after the rate limit check carries the
    X-RateLimit-* headers from that single check.

    Responses:
    - 200: ComplianceResult
    - 400: missing file, not a PDF, or larger than 10MB
    - 413: extracted text too long
    - 422: no text could be extracted
    - 429: rate limit exceeded (with retryAfter)
    - 500: any other failure
    """
    headers: dict[str, str] = {}
    try:
        identifier = client_identifier(request)
        rate_limit = await limiter.check(identifier)
        headers = get_rate_limit_headers(rate_limit)

        if not rate_limit.allowed:
            retry_after = datetime.fromtimestamp(rate_limit.reset / 1000, tz=UTC).isoformat()
            logger.warning("Request rate limited", identifier=identifier, retry_after=retry_after)
            return error_response(
                429,
                "Te veel verzoeken. Probeer het over een minuut opnieuw.",
                headers,
                retryAfter=retry_after,
            )

        try:
            form = await request.form()
        except HTTPException:
            form = {}
        file = form.get("file")
        if not isinstance(file, UploadFile):
            return error_response(400, "Geen bestand geüpload", headers)

        if file.content_type != PDF_CONTENT_TYPE:
            return error_response(400, "Alleen PDF bestanden toegestaan", headers)

        if file.size is not None and file.size > settings.max_upload_bytes:
            return error_response(400, "Bestand te groot (max 10MB)", headers)

        content = await file.read()
        if len(content) > settings.max_upload_bytes:
            return error_response(400, "Bestand te groot (max 10MB)", headers)

        logger.info("Invoice received", filename=file.filename, size_bytes=len(content))

        text = await ocr.extract_text(content)

        if len(text) > settings.max_text_chars:
            return error_response(
                413,
                f"Factuur bevat te veel tekst: {len(text)} tekens "
                f"(maximaal {settings.max_text_chars} tekens toegestaan)",
                headers,
            )

        if not text.strip():
            return error_response(422, "Kon geen tekst uit de PDF halen", headers)

        fields = await extractor.extract(text)
        result = calculate_compliance(fields)

        return JSONResponse(content=result.model_dump(exclude_none=True), headers=headers)

    except Exception as e:
        logger.exception("Invoice check failed")
        return error_response(500, str(e) or GENERIC_ERROR_MESSAGE, headers)
