# sheetlens/observability/middleware.py
from __future__ import annotations

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from sheetlens.observability.context import LOG_CONTEXT
from sheetlens.observability.metrics import inc_counter, observe_ms


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Starts every request with a fresh logging context and echoes x-request-id."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        tokens = {
            name: var.set(rid if name == "request_id" else None)
            for name, var in LOG_CONTEXT.items()
        }
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = rid
            return response
        finally:
            for name, token in tokens.items():
                LOG_CONTEXT[name].reset(token)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # Route template keeps label cardinality bounded (/chart-data/{file_id})
            route = request.scope.get("route")
            path = getattr(route, "path", None) or "unmatched"
            elapsed_ms = (time.perf_counter() - started) * 1000
            inc_counter("http_requests_total", method=request.method, path=path, status=status_code)
            observe_ms("http_request_duration_ms", elapsed_ms, method=request.method, path=path)
