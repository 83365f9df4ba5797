"""Domain exceptions and their HTTP rendering."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = structlog.get_logger()


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DataAccessError(StorefrontError):
    """Raised when a query against the database fails."""

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Raised when a requested record does not exist."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConflictError(StorefrontError):
    """Raised when an operation would violate a uniqueness or reference rule."""


class InvalidRequestError(StorefrontError):
    """Raised when request data fails a business rule."""


class AuthenticationError(StorefrontError):
    """Raised when credentials or the session token are missing or invalid."""


class PermissionDeniedError(StorefrontError):
    """Raised when an authenticated user lacks admin rights."""


class AuthProviderError(StorefrontError):
    """Raised when the hosted auth provider cannot be reached or misbehaves."""


ERROR_STATUS_CODES: dict[type, int] = {
    DataAccessError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    AuthProviderError: status.HTTP_502_BAD_GATEWAY,
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Map StorefrontError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(
            "Request failed",
            error=exc.message,
            error_type=type(exc).__name__,
        )
        # Internal details stay in the logs
        message = "Internal server error" if isinstance(exc, DataAccessError) else exc.message
    else:
        logger.info(
            "Request rejected",
            error=exc.message,
            error_type=type(exc).__name__,
            status_code=status_code,
        )
        message = exc.message
    return error_response(status_code, message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException in the standard error envelope."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation failures as a single readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "; ".join(messages))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unexpected exceptions."""
    logger.exception("Unhandled error", error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on the application."""
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
