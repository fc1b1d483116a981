"""
Posts & Comments API — Access Logging Middleware
==================================================

What:  One access-log line per API call, tagged with the resource and record
       it touched, e.g. ``PUT /comment/ab12… 404 3.2ms [rid]``.
Who:   Applied to every request via Starlette middleware, inside
       RequestIDMiddleware so the request ID is already set.

Probe endpoints (``/`` and ``/health``) are not logged. Status decides the
level: 5xx is ERROR, 4xx is WARNING, the rest INFO. Bodies are never logged.
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from posts_api.middleware.request_id import request_id_var

logger = logging.getLogger("posts_api.access")

_PROBE_PATHS = frozenset({"/", "/health"})


def split_resource_path(path: str) -> Tuple[str, Optional[str]]:
    """``/post/abc`` → ("post", "abc"); ``/comment`` → ("comment", None)."""
    parts = [part for part in path.split("/") if part]
    if not parts:
        return "", None
    return parts[0], parts[1] if len(parts) > 1 else None


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _PROBE_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        resource, record_id = split_resource_path(path)
        rid = request_id_var.get()
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "resource": resource,
                "record_id": record_id,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
