"""
Blog API Backend — Request Logging Middleware
===============================================

What:  One access-log line per HTTP request: method, route, post id, status,
       duration.
Why:   Uvicorn's own access log has no request id and no timing; this one
       carries both and picks its level from the status code.
When:  Runs inside RequestIDMiddleware, so the request id is already set.

What we log vs what we DON'T log:
    ✅ Log: method, path, matched route, post id, status, duration, request ID
    ❌ Don't log: request bodies (post content is user data)
"""

import logging
import time
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blog_api.middleware.request_id import request_id_var

logger = logging.getLogger("blog_api.access")

SKIPPED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def describe_target(scope: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """
    Route template and post id for a request scope, once routing has run.

    Unmatched requests (404s from the router, static files) have no route;
    the raw path is used instead.
    """
    route = scope.get("route")
    path_params = scope.get("path_params") or {}
    post_id = path_params.get("post_id")
    return {
        "route": getattr(route, "path", None) or scope.get("path", ""),
        "post_id": None if post_id is None else str(post_id),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request after the response is produced.

    An exception escaping the app is logged as a 500 and re-raised so the
    server's own error handling still applies.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, start_time, exc_info=True)
            raise

        self._log(request, response.status_code, start_time)
        return response

    @staticmethod
    def _log(request: Request, status: int, start_time: float, exc_info: bool = False) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        target = describe_target(request.scope)
        rid = request_id_var.get("")
        post_suffix = f" post={target['post_id']}" if target["post_id"] else ""

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s]%s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            post_suffix,
            exc_info=exc_info,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "route": target["route"],
                "post_id": target["post_id"],
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
