# src/wizeprompt/core/logging/middleware.py
"""
Request ID middleware for FastAPI / Starlette.

Every request gets a correlation id: the incoming `X-Request-ID` header when it
looks sane, a fresh UUID4 otherwise. The id is stored in the logging contextvar
for the duration of the request and echoed back on the response header.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Opaque ids only: letters, digits, dash, underscore, dot; bounded length.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Sets a request id for each incoming request and adds it to the response.
    """

    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
