"""
FastAPI exception handlers.

Services already return envelopes for their own failures; these handlers cover
what escapes them: RepositoryError raised outside a service operation, and
request validation (malformed path params or JSON bodies), reported as 400.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from wizeprompt.exceptions.base import RepositoryError

logger = logging.getLogger(__name__)

REQUEST_VALIDATION_MESSAGE = "Invalid request"


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Status from exc.http_status(); body from exc.to_payload() plus the envelope fields.
    """
    status = exc.http_status()
    log = logger.error if status >= 500 else logger.info
    log("api.repository_error", extra={"method": request.method, "path": request.url.path, "status": status})
    return JSONResponse(
        status_code=status,
        content={"status": status, "message": exc.message, **exc.to_payload()},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(
        "api.request_validation_error",
        extra={"method": request.method, "path": request.url.path, "error_count": len(exc.errors())},
    )
    return JSONResponse(
        status_code=400,
        content={"status": 400, "message": REQUEST_VALIDATION_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
