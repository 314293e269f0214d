"""
NoteKeeper Backend: Access Log Middleware
==========================================

What:  One "notekeeper.access" line per request with the route template,
       status, duration and request ID.
How:   Runs just inside RequestIDMiddleware. After the response is built,
       the matched route template ("/api/notes/{note_id}") is logged
       instead of the raw path, so note ids never end up in access logs and
       lines for the same endpoint group together.

Level by outcome:
    5xx                       → ERROR    (store outage, bugs)
    401, 429                  → WARNING  (failed login, throttled client)
    other 4xx                 → INFO     (unknown note, invalid body,
                                          taken username: ordinary API use)
    2xx/3xx                   → INFO
    healthy /health probes    → not logged

Request bodies are never logged; they carry passwords on /api/users and
/api/login.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeeper.middleware.request_id import current_request_id

logger = logging.getLogger("notekeeper.access")

_NOTEWORTHY_CLIENT_ERRORS = {401, 429}


def access_log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code in _NOTEWORTHY_CLIENT_ERRORS:
        return logging.WARNING
    return logging.INFO


def route_label(request: Request) -> str:
    """Matched route template, or the raw path when no route matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        status_code = response.status_code
        route = route_label(request)
        if route == "/health" and status_code == 200:
            return response

        rid = current_request_id(request)
        logger.log(
            access_log_level(status_code),
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            route,
            status_code,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": route,
                "status": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
