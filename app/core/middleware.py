import time

from starlette.middleware.base import BaseHTTPMiddleware

from app.core.exceptions import TooLargeError, error_response
from app.utils.logger import get_logger, log_request
from app.utils.metrics import upload_rejections

logger = get_logger("app.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        log_request(logger, request.method, request.url.path, response.status_code,
                    time.perf_counter() - started)
        return response


class UploadSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects upload requests whose declared length cannot fit under the ceiling."""

    def __init__(self, app, path: str, max_bytes: int):
        super().__init__(app)
        self.path = path
        self.max_bytes = max_bytes

    async def dispatch(self, request, call_next):
        if request.method == "POST" and request.url.path == self.path:
            length = request.headers.get("content-length")
            try:
                size = int(length) if length is not None else None
            except ValueError:
                size = None
            if size is not None and size > self.max_bytes:
                upload_rejections.labels(reason="too_large").inc()
                logger.info(f"Rejected upload request of {size} bytes before reading the body")
                return error_response(TooLargeError.status_code, TooLargeError.message)
        return await call_next(request)
