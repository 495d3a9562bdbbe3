"""
X-Recruit API - HTTP Middleware

- RequestLoggingMiddleware: request id, client address, timing, one log line
  at start and one at completion
- SecurityHeadersMiddleware: hardening headers; auth responses are never cached
- RequestSizeLimitMiddleware: rejects oversized bodies before they are read
"""

import time
from typing import Callable, FrozenSet

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.core.logging_config import (
    logger,
    set_request_id,
    set_client_ip,
    clear_context,
    generate_request_id,
)


# Polled constantly by load balancers and browsers
QUIET_PATHS: FrozenSet[str] = frozenset({
    "/api/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
})

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


def should_skip_logging(path: str) -> bool:
    return path in QUIET_PATHS


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def completion_level(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Correlates all log lines of a request and records its outcome.

    An incoming X-Request-ID is reused so a frontend can trace a call end to
    end. Neither bodies nor the Authorization header are logged: auth
    requests carry passwords and tokens.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        set_client_ip(client_address(request))

        method, path = request.method, request.url.path
        quiet = should_skip_logging(path)
        started = time.perf_counter()

        if not quiet:
            logger.info(
                f"→ {method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": method,
                    "http_path": path,
                    "user_agent": request.headers.get("user-agent", ""),
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"✗ {method} {path} - {type(exc).__name__} ({elapsed_ms:.2f}ms)",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": method,
                    "http_path": path,
                    "duration_ms": elapsed_ms,
                }
            )
            clear_context()
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"

        if not quiet:
            getattr(logger, completion_level(response.status_code))(
                f"← {method} {path} - {response.status_code} ({elapsed_ms:.2f}ms)",
                extra={
                    "event_type": "http_request_complete",
                    "http_method": method,
                    "http_path": path,
                    "http_status": response.status_code,
                    "duration_ms": elapsed_ms,
                }
            )

        clear_context()
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Auth payloads are a few hundred bytes; anything near the limit is abuse"""

    def __init__(self, app: ASGIApp, max_size: int = 1024 * 1024):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")

        if declared.isdigit() and int(declared) > self.max_size:
            logger.warning(
                f"Rejected {declared}-byte body on {request.url.path} (limit {self.max_size})",
                extra={"event_type": "request_too_large", "http_path": request.url.path}
            )
            return JSONResponse(
                status_code=413,
                content={"success": False, "message": "Request body too large"}
            )

        return await call_next(request)


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "RequestSizeLimitMiddleware",
    "should_skip_logging",
    "client_address",
    "QUIET_PATHS",
]
