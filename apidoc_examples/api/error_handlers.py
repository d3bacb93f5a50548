"""Error Handlers: global exception handlers shared by every example app.

Invariants:
    - ExampleError -> structured JSON with error code, message, severity
    - HTTPException (unknown path, wrong method) -> the same envelope shape
    - Exception (catch-all) -> never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from apidoc_examples.core.errors import ErrorCategory, ErrorSeverity, ExampleError

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION),
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_example_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_example_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ExampleError)
    async def example_error_handler(request: Request, exc: ExampleError):
        """Handle all apidoc-examples errors."""
        logger.error(
            f"ExampleError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Wrap framework HTTP errors in the shared envelope."""
        logger.info(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_build_http_error_response(exc),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_http_error_response(exc: StarletteHTTPException) -> dict:
    code, category = _HTTP_ERROR_CODES.get(
        exc.status_code, ("HTTP_ERROR", ErrorCategory.INTERNAL),
    )
    return {
        "error": {
            "code": code,
            "message": str(exc.detail),
            "category": category.value,
            "severity": ErrorSeverity.ERROR.value,
        },
    }
