"""
Service-layer plumbing: every public operation returns a ServiceResponse and
owns its unit of work.

`service_operation` turns the exceptions raised inside an operation into
envelopes and rolls the session back:

    RepositoryError  -> status = exc.http_status(), message = exc.message
    anything else    -> status 500, message = str(exc)
"""

import functools
import logging
import time
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from wizeprompt.exceptions.base import RepositoryError
from wizeprompt.schemas.response import ServiceResponse

logger = logging.getLogger(__name__)

Operation = Callable[..., Awaitable[ServiceResponse]]


async def _rollback(db: AsyncSession, event: str) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception(f"{event}.rollback_failed")


def service_operation(event: str) -> Callable[[Operation], Operation]:
    """
    Decorate an `async def op(db, ...) -> ServiceResponse`.

    `event` prefixes the log events, e.g. "conversation.create" logs
    "conversation.create.completed" / ".rejected" / ".failed".
    """

    def decorator(func: Operation) -> Operation:
        @functools.wraps(func)
        async def wrapper(db: AsyncSession, *args: Any, **kwargs: Any) -> ServiceResponse:
            start = time.perf_counter()
            try:
                response = await func(db, *args, **kwargs)
            except RepositoryError as exc:
                await _rollback(db, event)
                status = exc.http_status()
                log = logger.error if status >= 500 else logger.info
                log(
                    f"{event}.rejected",
                    extra={"status": status, "error_code": exc.error_code, "detail": exc.message},
                )
                return ServiceResponse(status=status, message=exc.message)
            except Exception as exc:
                await _rollback(db, event)
                logger.exception(f"{event}.failed", extra={"status": 500})
                return ServiceResponse(status=500, message=str(exc))

            logger.info(
                f"{event}.completed",
                extra={
                    "status": response.status,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                },
            )
            return response

        return wrapper

    return decorator
