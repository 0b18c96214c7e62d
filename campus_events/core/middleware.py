"""
Campus Events - HTTP Middleware
Request correlation and timing, response hardening headers, body size cap
"""

import time
from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from starlette.types import ASGIApp

from campus_events.core.logging_config import (
    logger,
    bind_request,
    clear_context,
    new_request_id,
)


# Probes and API docs are not worth an access log line
QUIET_PATHS = frozenset({"/health", "/", "/favicon.ico", "/docs", "/redoc", "/openapi.json"})

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id (the caller's X-Request-ID, or a fresh one) for the
    duration of the request, echoes it back, and logs one line per request
    with its status and duration.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or new_request_id()
        bind_request(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
        except Exception as exc:
            logger.error(
                f"{request.method} {request.url.path} raised {type(exc).__name__}",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": request.url.path,
                    "duration_ms": (time.perf_counter() - started) * 1000,
                },
            )
            raise
        else:
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
            if request.url.path not in QUIET_PATHS:
                logger.log_request(
                    request.method,
                    request.url.path,
                    response.status_code,
                    elapsed_ms,
                    client_ip=request.client.host if request.client else "unknown",
                )
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Answers 413 when the declared Content-Length exceeds `max_size`"""

    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            logger.warning(
                f"Rejected {request.url.path}: body of {declared} bytes exceeds {self.max_size}",
                extra={
                    "event_type": "request_too_large",
                    "content_length": int(declared),
                    "max_size": self.max_size,
                },
            )
            return JSONResponse(
                status_code=413,
                content={"message": f"Request body too large. Maximum size is {self.max_size // (1024 * 1024)}MB"},
            )

        return await call_next(request)
