"""Error taxonomy shared by services and the HTTP boundary.

Services raise the exceptions below; the handlers registered by
:func:`register_exception_handlers` turn them into the uniform error body
``{"success": false, "error": <kind>, "message": <str>}``.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An unexpected error occurred"


class BlogError(Exception):
    """Base class for errors that map onto an HTTP response."""

    kind = "SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_SERVER_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(BlogError):
    kind = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidCredentials(BlogError):
    """Login failure. The message never says which credential was wrong."""

    kind = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid username or password"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class Unauthorized(BlogError):
    kind = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(BlogError):
    kind = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFound(BlogError):
    kind = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "The requested resource was not found"


class ServerError(BlogError):
    pass


def error_response(kind: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": kind, "message": message},
    )


async def _blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    if isinstance(exc, ServerError):
        logger.error("Server error on %s %s: %s", request.method, request.url.path, exc.message)
        # internal detail stays in the log
        return error_response(exc.kind, GENERIC_SERVER_MESSAGE, exc.status_code)
    return error_response(exc.kind, exc.message, exc.status_code)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        # without list indexes or the JSON decode position
        parts = [str(part) for part in first.get("loc", ()) if part != "body" and not isinstance(part, int)]
        location = ".".join(parts)
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = InvalidInput.default_message
    return error_response(InvalidInput.kind, message, InvalidInput.status_code)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(NotFound.kind, "Endpoint not found", exc.status_code)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response("METHOD_NOT_ALLOWED", "Method not allowed", exc.status_code)
    return error_response("HTTP_ERROR", str(exc.detail), exc.status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(ServerError.kind, GENERIC_SERVER_MESSAGE, ServerError.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogError, _blog_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
