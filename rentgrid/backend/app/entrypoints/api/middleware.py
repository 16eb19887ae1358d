# app/entrypoints/api/middleware.py
"""
Request logging: method, path, status, duration.
Warns on slow requests (>3s) and 4xx, errors on 5xx.
"""
from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

log = logging.getLogger("app.requests")

SLOW_REQUEST_MS = 3000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        msg = f"{request.method} {request.url.path} status={response.status_code} duration={duration_ms}ms"

        if response.status_code >= 500:
            log.error(msg)
        elif response.status_code >= 400 or duration_ms > SLOW_REQUEST_MS:
            log.warning(msg)
        else:
            log.info(msg)

        return response
