from functools import lru_cache

from fastapi import Request

from ..services.document_ocr import DocumentOcrClient
from ..services.field_extractor import FieldExtractionClient
from ..services.rate_limit import RateLimiterBase


def get_rate_limiter(request: Request) -> RateLimiterBase:
    # Owned by the app lifespan (see api.main)
    return request.app.state.rate_limiter


@lru_cache
def get_ocr_client() -> DocumentOcrClient:
    return DocumentOcrClient()


@lru_cache
def get_field_extractor() -> FieldExtractionClient:
    return FieldExtractionClient()
