"""
Exception handlers rendering every failure as
`{"success": false, "message": ..., "error": ...}`.
"""

from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_buddy.api.deps import describe_errors
from event_buddy.core.exceptions import AppError
from event_buddy.core.logging import get_logger
from event_buddy.schemas.common import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, message: str, error: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, error=error).model_dump(),
        headers=headers,
    )


def _error_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase.replace(" ", "").replace("-", "")
    except ValueError:
        return "Error"


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        error = exc.code
    else:
        error = _error_name(exc.status_code)
    if exc.status_code >= 500:
        logger.error("request_error", error=error, message=str(exc.detail))
    return error_response(exc.status_code, str(exc.detail), error, getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, describe_errors(exc.errors()), "InvalidInput")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "InternalServerError",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
