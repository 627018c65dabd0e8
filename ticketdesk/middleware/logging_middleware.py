"""
Logging Middleware - one log line per agent request

Each request gets an id (taken from X-Request-ID when the caller sends one)
that is echoed back in the response headers.
"""
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

QUIET_PREFIXES = ("/api/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every non-health request"""

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        client_host = request.client.host if request.client else "unknown"
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.error(
                f"[{request_id}] {request.method} {path} failed after {elapsed_ms}ms: {e}",
                extra={"request_id": request_id, "client": client_host},
                exc_info=True
            )
            raise

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"[{request_id}] {request.method} {path} -> {response.status_code} ({elapsed_ms}ms)",
            extra={"request_id": request_id, "client": client_host, "status_code": response.status_code}
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(elapsed_ms)
        return response
