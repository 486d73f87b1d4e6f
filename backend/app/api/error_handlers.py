"""Error Handlers — global exception handlers that write the error envelope.

Invariants:
    - ApiError → envelope with exc.http_status, exc.message and exc.detail
    - HTTPException (Starlette/FastAPI) → envelope from status_code and detail
    - RequestValidationError → 400 "Validation failed", one entry per field error
    - Exception (catch-all) → 500 "Internal server error"; never leaks internal details
    - The response status line always equals the envelope's code

Design Decisions:
    - Four-layer handler: declared (ApiError), framework (HTTPException),
      validation (Pydantic), catch-all (Exception)
    - Validation failures answer 400 rather than FastAPI's default 422
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.envelope import (
    build_error_envelope, build_internal_error_envelope,
)
from app.core.errors import ApiError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_http_exception_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _log_extra(request: Request, status_code: int, error_code: str) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_code": error_code,
    }


def _register_api_error_handler(app: FastAPI) -> None:
    """Register declared HTTP error handler."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        """Handle all declared HTTP errors raised by services and routes."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level, f"ApiError: {exc.message}",
            extra=_log_extra(request, exc.http_status, exc.code),
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_envelope(),
        )


def _register_http_exception_handler(app: FastAPI) -> None:
    """Register framework HTTPException handler (unknown routes, 405s)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Handle framework-raised HTTP errors."""
        logger.warning(
            f"HTTPException on {request.url.path}: {exc.detail}",
            extra=_log_extra(request, exc.status_code, "HTTP_ERROR"),
        )
        detail = exc.detail
        message = detail if isinstance(detail, str) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_envelope(exc.status_code, message, detail),
            headers=getattr(exc, "headers", None),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra=_log_extra(request, 400, "VALIDATION_ERROR"),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_envelope(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra=_log_extra(request, 500, "INTERNAL_ERROR"),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=build_internal_error_envelope(),
        )


def _field_name(loc: tuple) -> str | None:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or None


def build_validation_error_envelope(exc: RequestValidationError) -> dict:
    """Build the 400 envelope from Pydantic's error list."""
    records = [
        {
            "field": _field_name(tuple(e.get("loc", ()))),
            "message": e.get("msg"),
            "code": e.get("type"),
        }
        for e in exc.errors()
    ]
    return build_error_envelope(
        status.HTTP_400_BAD_REQUEST, "Validation failed", {"errors": records},
    )
