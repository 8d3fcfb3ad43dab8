from typing import Annotated

from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from wizeprompt.database.session import get_async_session
from wizeprompt.schemas.response import ServiceResponse

# One AsyncSession per request
DbSession = Annotated[AsyncSession, Depends(get_async_session)]


def envelope_response(response: ServiceResponse) -> JSONResponse:
    """The envelope's status is the HTTP status; the body is the envelope without nulls."""
    return JSONResponse(status_code=response.status, content=response.to_body())
