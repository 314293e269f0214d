"""
NoteKeeper Backend: Request ID Middleware
==========================================

What:  Gives every request a correlation ID, echoed in the X-Request-ID
       response header and in every error body.
How:   A client-supplied X-Request-ID is reused only if it is a short token
       of safe characters; anything else (spaces, newlines, 200-char
       strings) is replaced by a generated ID so it cannot forge log lines.

Where the ID lives:
    request_id_var       ContextVar, read by loggers and exception handlers
                         running inside this middleware
    request.state        shared scope state, read by the outermost 500
                         handler after the ContextVar has been reset

This is the outermost middleware, so the rate limiter's 429 and the access
log line both see the ID.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value: Optional[str]) -> str:
    """Client ID when it is a safe token, otherwise a fresh one."""
    if header_value and _CLIENT_ID_PATTERN.match(header_value):
        return header_value
    return new_request_id()


def current_request_id(request: Optional[Request] = None) -> str:
    """
    ID of the request being handled.

    Prefers request.state, which outlives the ContextVar for handlers that
    run outside this middleware.
    """
    if request is not None:
        rid = getattr(request.state, "request_id", None)
        if rid:
            return rid
    return request_id_var.get("")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
