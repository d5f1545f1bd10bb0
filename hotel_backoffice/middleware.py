"""
FastAPI middleware for request tracing and correlation.

This module provides middleware components for adding observability to HTTP requests,
including unique request IDs for log correlation and the request start time used
to fill ``response_time`` in the response envelope.
"""

from __future__ import annotations

import time
import uuid
from contextvars import ContextVar
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hotel_backoffice.metrics import http_request_duration

# perf_counter() value captured when the current request entered the app
request_started_at: ContextVar[float | None] = ContextVar("request_started_at", default=None)


def elapsed_ms() -> int:
    """
    Milliseconds since the current request started.

    Returns 0 outside of a request (e.g. when called from a script).
    """
    started = request_started_at.get()
    if started is None:
        return 0
    return round((time.perf_counter() - started) * 1000)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add unique request IDs to each HTTP request.

    This middleware generates a UUID for each incoming request and:
    1. Stores it in request.state.request_id for access in route handlers
    2. Binds it into structlog context vars so every log line carries it
    3. Adds it to the response as X-Request-ID header for client correlation

    Example:
        >>> app.add_middleware(RequestIDMiddleware)
        >>> # Response headers will include:
        >>> # X-Request-ID: 550e8400-e29b-41d4-a716-446655440000
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """
        Process each request by adding a unique request ID.

        Args:
            request: Incoming FastAPI request
            call_next: Next middleware or route handler in chain

        Returns:
            Response with X-Request-ID header added
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        token = request_started_at.set(started)
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
            request_started_at.reset(token)

        http_request_duration.labels(method=request.method).observe(
            time.perf_counter() - started
        )
        response.headers["X-Request-ID"] = request_id

        return response
