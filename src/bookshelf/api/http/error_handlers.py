"""Global exception handlers for the HTTP gateway.

ServiceError → the kind's HTTP status with ``{"error": {kind, message, field}}``.
RequestValidationError → 400 with field details.
Anything else → 500 without internal details.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from src.bookshelf.core.errors import ErrorKind, ServiceError


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        logger.bind(kind=exc.kind.value, path=request.url.path).info(
            "service.error: {}", exc.message
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on {}: {}", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error("Unhandled exception on {}", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "kind": ErrorKind.UNKNOWN.value,
                    "message": "An unexpected error occurred",
                    "field": None,
                }
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    errors = exc.errors()
    first_field = ".".join(str(loc) for loc in errors[0]["loc"]) if errors else None
    return {
        "error": {
            "kind": ErrorKind.INVALID_ARGUMENT.value,
            "message": "Invalid request data",
            "field": first_field,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        }
    }
