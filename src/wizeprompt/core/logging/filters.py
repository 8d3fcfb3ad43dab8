# src/wizeprompt/core/logging/filters.py
"""
Logging filters shared by every handler.

  - RequestIdFilter: stamps `record.request_id` from a contextvar set by the
    HTTP middleware, so log lines emitted while serving a request can be
    correlated with the `X-Request-ID` response header.
  - RedactFilter: masks sensitive attributes passed through `extra={...}`.

The request id lives in a `contextvars.ContextVar`, which follows asyncio tasks,
so concurrent requests never see each other's id.
"""

import contextvars
import logging
from logging import LogRecord

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """
    Set the request id in the current context and return the token to allow reset.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    """
    Restore the value saved by set_request_id().
    """
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee every LogRecord has a `request_id` attribute.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar,
    then the "-" sentinel (keeps `%(request_id)s` format strings safe).
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """Mask record attributes whose name looks like a credential."""

    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization", "api_key"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
