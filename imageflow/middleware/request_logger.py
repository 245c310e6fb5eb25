# imageflow/middleware/request_logger.py
"""
Request logging middleware for the FastAPI application.

Logs each request with its status code and duration. Cookies are never
logged since they carry client metrics.
"""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.REQUEST_LOGGER, LogSource.MIDDLEWARE)

# Requests taking longer than this are logged as warnings
SLOW_REQUEST_SECONDS = 5.0


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Request logging middleware with timing."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

        # Paths to exclude from logging
        self.exclude_paths = {
            "/health",
            "/docs",
            "/redoc",
            "/openapi.json",
            "/favicon.ico",
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        start_time = time.time()
        logger.debug(
            f"{request.method} {request.url.path}",
            emoji=LogEmoji.INCOMING,
            extra_context={
                "query_params": dict(request.query_params),
                "client_ip": getattr(request.client, "host", "unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            logger.error(
                f"{request.method} {request.url.path} -> FAILED ({duration_ms}ms)",
                exception=exc,
                extra_context={"exception_type": type(exc).__name__},
            )
            raise

        self._log_response(request, response, time.time() - start_time)
        return response

    def _log_response(self, request: Request, response: Response, duration: float) -> None:
        status_code = response.status_code
        duration_ms = round(duration * 1000, 2)
        message = f"{request.method} {request.url.path} -> {status_code} ({duration_ms}ms)"
        context = {
            "status_code": status_code,
            "duration_ms": duration_ms,
            "content_type": response.headers.get("content-type"),
        }

        if status_code >= 500:
            logger.error(message, extra_context=context)
        elif status_code >= 400 or duration > SLOW_REQUEST_SECONDS:
            logger.warning(message, extra_context=context)
        else:
            logger.info(message, extra_context=context, emoji=LogEmoji.OUTGOING)
