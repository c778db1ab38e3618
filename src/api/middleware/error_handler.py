"""
Error rendering.

Every failure leaves the API as the same JSON shape::

    {"errorCode": "INSUFFICIENT_STOCK", "message": "...", "hint": "...",
     "details": {"available": 5, "requested": 10}, "path": "/api/stock/out",
     "timestamp": "..."}

Domain errors carry their own code and details; the status code is looked up
from the exception type.
"""

from collections.abc import Awaitable, Callable
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ConcurrentUpdateError,
    ConfigurationError,
    DuplicateItemError,
    EmptyInputError,
    FileTooLargeError,
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
    ParserError,
    StockroomError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

# Checked in order, so subclasses must precede their bases.
EXCEPTION_STATUS_MAP: dict[type[Exception], HTTPStatus] = {
    ItemNotFoundError: HTTPStatus.NOT_FOUND,
    InvalidQuantityError: HTTPStatus.BAD_REQUEST,
    InsufficientStockError: HTTPStatus.BAD_REQUEST,
    ConcurrentUpdateError: HTTPStatus.CONFLICT,
    DuplicateItemError: HTTPStatus.CONFLICT,
    EmptyInputError: HTTPStatus.BAD_REQUEST,
    FileTooLargeError: HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
    ValidationError: HTTPStatus.BAD_REQUEST,
    ParserError: HTTPStatus.UNPROCESSABLE_ENTITY,
    StorageError: HTTPStatus.INTERNAL_SERVER_ERROR,
    ConfigurationError: HTTPStatus.INTERNAL_SERVER_ERROR,
    ValueError: HTTPStatus.BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID or name and try GET /api/stock/available-items.",
    "INVALID_QUANTITY": "Quantities must be whole numbers; stock-in/out quantities must be positive.",
    "INSUFFICIENT_STOCK": "Reduce the quantity to at most the available stock.",
    "CONCURRENT_UPDATE": "The item changed while updating. Retry the request.",
    "DUPLICATE_ITEM": "An item with this name already exists. Names are case-insensitive.",
    "PARSING_FAILED": "Ensure the file is a valid .xlsx, .xls or UTF-8 .csv spreadsheet.",
    "EMPTY_INPUT": "Provide at least one row with an id or name and a final quantity.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "This path does not accept that HTTP method.",
    409: "The request conflicts with the current state. Retry or change the input.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _hint(error_code: str, status_code: int) -> str:
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return HTTPStatus.INTERNAL_SERVER_ERROR


def render_error(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_hint(error_code, status_code),
        details=details or None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log ``exc`` and render it; 5xx responses are logged with the traceback."""
    status_code = status_for(exc)
    if isinstance(exc, StockroomError):
        error_code, message, details = exc.code, exc.message, exc.details
    else:
        error_code, message, details = type(exc).__name__, str(exc), None

    event = {"status_code": status_code, "error_code": error_code, "error": message}
    if status_code >= 500:
        logger.error("request_failed", exc_info=exc, **event)
    else:
        logger.warning("request_rejected", **event)

    return render_error(request, status_code, error_code, message, details)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no route handler converted."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(request, exc)


def _format_validation_errors(exc: RequestValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    async def on_domain_error(request: Request, exc: StockroomError) -> JSONResponse:
        return error_response(request, exc)

    async def on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _format_validation_errors(exc)
        logger.warning("request_validation_failed", errors=errors)
        return render_error(
            request,
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": errors},
        )

    async def on_http_error(request: Request, exc: HTTPException) -> JSONResponse:
        try:
            error_code = HTTPStatus(exc.status_code).name
        except ValueError:
            error_code = "HTTP_ERROR"
        return render_error(
            request,
            exc.status_code,
            error_code,
            str(exc.detail) if exc.detail else "An error occurred",
        )

    app.add_exception_handler(StockroomError, on_domain_error)
    app.add_exception_handler(RequestValidationError, on_request_validation)
    app.add_exception_handler(HTTPException, on_http_error)
