"""
Exception types and handlers shared across the API.

``setup_exception_handlers`` is called from ``linkup.main`` while building the
application.
"""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("linkup")


class ExternalServiceError(Exception):
    """A hosted dependency (object storage, mail API) failed to do its job."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


def _field_name(loc) -> str:
    # loc looks like ("body", "password") or ("query", "limit")
    if not loc:
        return ""
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "form", "header")]
    return ".".join(parts) or str(loc[-1])


def _clean_message(error: dict) -> str:
    message = error.get("msg", "Invalid value")
    prefix = "Value error, "
    if message.startswith(prefix):
        message = message[len(prefix):]
    return message


def bad_request_from(exc: ValidationError) -> HTTPException:
    """400 carrying the first message of a schema built by hand inside a route"""
    errors = exc.errors()
    message = _clean_message(errors[0]) if errors else "Invalid value"
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(error.get("loc", ())), "msg": _clean_message(error)}
        for error in exc.errors()
    ]
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "errors": errors},
    )


async def external_service_exception_handler(request: Request, exc: ExternalServiceError) -> JSONResponse:
    logger.error(f"{exc.service} failed during {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"{exc.service} is currently unavailable"},
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error in {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ExternalServiceError, external_service_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
