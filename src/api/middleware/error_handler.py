"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GarageError,
    InsufficientStockError,
    NotFoundError,
    PartialFailureError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Domain exceptions to HTTP status codes; first match wins, others are 500
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    PartialFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/items to list items.",
    "SERVICE_NOT_FOUND": "Check the service ID and try GET /api/services to list services.",
    "VEHICLE_NOT_FOUND": "Check the vehicle ID and try GET /api/vehicles to list vehicles.",
    "REPARATION_NOT_FOUND": "Check the reparation ID and try GET /api/reparations.",
    "STOCK_TRANSACTION_NOT_FOUND": "Check the transaction ID and try GET /api/stock-transactions.",
    "CATEGORY_NOT_FOUND": "Check the category ID and try GET /api/categories.",
    "SUPPLIER_NOT_FOUND": "Check the supplier ID and try GET /api/suppliers.",
    "INSUFFICIENT_STOCK": "Lower the requested quantity or record a purchase first.",
    "INVALID_ARGUMENT": "Check the field named in the message against the allowed values.",
    "INVALID_STATUS_TRANSITION": "Completed and cancelled reparations cannot change status or lines.",
    "ITEM_IN_USE": "Items with stock history cannot be deleted.",
    "DUPLICATE_ITEM_CODE": "Choose another item_code or omit it to have one generated.",
    "UNAUTHORIZED": "Send a valid bearer token in the Authorization header.",
    "FORBIDDEN": "This action requires a different role.",
    "PARTIAL_FAILURE": "Stock may need manual correction; see detail for uncompensated movements.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "You are not allowed to perform this action.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with existing data.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standardized JSON error response."""
    status_code = _status_for(exc)

    # Prefer GarageError.code, fall back to class name
    if isinstance(exc, GarageError):
        error_code = exc.code
        message = exc.message
        detail = exc.details or None
    else:
        error_code = exc.__class__.__name__
        message = str(exc) if status_code < 500 else "Internal server error"
        detail = None

    request_id = getattr(request.state, "request_id", None)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        status=status_code,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail,
            path=request.url.path,
        ).model_dump(mode="json"),
        headers=headers,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the exception handlers to
    standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(GarageError)
    async def garage_exception_handler(request: Request, exc: GarageError) -> JSONResponse:
        """Handle domain errors."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Machine-readable error code for a bare HTTPException."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
