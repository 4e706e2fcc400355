"""Translation of domain exceptions into HTTP errors."""
from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from magazine_backend.domain.exceptions import (
    AuthenticationError,
    DomainException,
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
    EntityValidationError,
    ExternalServiceError,
    OcrPipelineError,
    RepositoryError,
)

logger = logging.getLogger(__name__)


def to_http_exception(exc: DomainException) -> HTTPException:
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, DuplicateEntityError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, RepositoryError):
        logger.error("Repository failure: %s", exc, exc_info=exc.cause or exc)
        return HTTPException(status_code=500, detail=str(exc))
    if isinstance(exc, DomainValidationError):
        if exc.details:
            return HTTPException(status_code=400, detail={"error": str(exc), "details": exc.details})
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, EntityValidationError):
        return HTTPException(status_code=400, detail={"error": str(exc), "details": exc.errors})
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, OcrPipelineError):
        return HTTPException(
            status_code=502,
            detail={"error": str(exc), "compression_events": exc.compression_events},
        )
    if isinstance(exc, ExternalServiceError):
        return HTTPException(status_code=502, detail=str(exc))
    logger.error("Unhandled domain error: %s", exc)
    return HTTPException(status_code=500, detail=str(exc))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Covers errors raised while dependencies are being built."""
    http_exc = to_http_exception(exc)
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})
