"""API middleware: request logging and CSRF header check."""

import time

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

_STATE_CHANGING_METHODS = ("POST", "PUT", "DELETE", "PATCH")
_CSRF_PROTECTED_PREFIX = "/api/v1/settings"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with timing."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = f"{time.time_ns()}"
        request.state.request_id = request_id

        logger.info(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request_failed", request_id=request_id, error=str(e))
            raise
        elapsed = time.time() - start_time
        logger.info(
            "request_completed",
            request_id=request_id,
            status_code=response.status_code,
            elapsed_ms=elapsed * 1000,
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed * 1000:.2f}ms"
        return response


class CSRFCheckMiddleware(BaseHTTPMiddleware):
    """Require X-Requested-With for state-changing settings requests."""

    async def dispatch(self, request: Request, call_next):
        if (
            request.url.path.startswith(_CSRF_PROTECTED_PREFIX)
            and request.method in _STATE_CHANGING_METHODS
            and request.headers.get("X-Requested-With") != "XMLHttpRequest"
        ):
            logger.info("csrf_header_missing", path=request.url.path, method=request.method)
            return JSONResponse(status_code=403, content={"detail": "Missing CSRF header"})
        return await call_next(request)
