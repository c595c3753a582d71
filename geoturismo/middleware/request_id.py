"""
Geoturismo Backend — Request ID Middleware
============================================

What:  Tags every request with a correlation ID, echoed in X-Request-ID.
How:   A client-supplied X-Request-ID is honoured when it is short and made of
       safe characters; anything else is replaced by a fresh UUID fragment.
       The ID lives in `request_id_var` for loggers and error bodies.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up in logs and JSON bodies verbatim.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: Optional[str]) -> str:
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
