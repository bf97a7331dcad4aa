"""Application errors and the handlers that render them as ``{"error": ...}``."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when required fields are missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFoundError(AppError):
    """Raised when a document or its backing file is absent."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Document not found"


class InvalidTypeError(AppError):
    """Raised when an uploaded file's MIME type is not allowed."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid file type. Allowed types: PDF, DOC, DOCX, TXT, JPG, JPEG, PNG, GIF, XLS, XLSX"


class TooLargeError(AppError):
    """Raised when an uploaded file exceeds the size ceiling."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "File too large. Maximum size is 10MB."


class InternalError(AppError):
    """Raised when the store or the filesystem fails."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "Route not found")
    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, f"Invalid request: {problems}")


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    """Turns anything the handlers above did not catch into a bare 500."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"{type(exc).__name__} on {request.url.path} (500): {exc}", exc_info=True)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(CatchAllExceptionMiddleware)
