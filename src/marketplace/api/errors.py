"""Exception-to-response mapping and request correlation for the API."""

from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from marketplace.shared.errors import MarketplaceError
from marketplace.utils.logging import bind_request_context, get_logger

CORRELATION_HEADER = "X-Correlation-ID"

logger = get_logger(__name__)


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    logger.info("request.rejected", code=exc.code, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "code": "validation", "details": exc.messages},
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Resource not found", "code": "not_found"})


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("request.version_conflict", error=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": "The resource was modified concurrently, please retry", "code": "conflict"},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def correlation_middleware(request: Request, call_next):
    """Bind a correlation id to the log context and echo it on the response.

    Unhandled errors are logged here and answered with a generic 500 that only
    exposes the correlation id.
    """
    correlation_id = request.headers.get(CORRELATION_HEADER) or uuid4().hex
    bind_request_context(
        correlation_id=correlation_id,
        method=request.method,
        path=request.url.path,
    )
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request.failed")
        response = JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "correlation_id": correlation_id},
        )
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
