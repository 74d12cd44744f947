"""
Request logging middleware: one line per request with method, path, status
and duration. Upload bodies are never logged since broker exports carry the
whole book.
"""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        fields = {"method": request.method, "path": request.scope.get("path", "")}
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            fields["duration_ms"] = round((time.perf_counter() - start) * 1000, 1)
            logger.exception(
                "request_failed %s %s after %.1fms",
                fields["method"], fields["path"], fields["duration_ms"],
                extra=fields,
            )
            raise

        fields["status"] = response.status_code
        fields["duration_ms"] = round((time.perf_counter() - start) * 1000, 1)
        logger.log(
            _level_for(response.status_code),
            "request_finished %s %s -> %s in %.1fms",
            fields["method"], fields["path"], fields["status"], fields["duration_ms"],
            extra=fields,
        )
        return response
