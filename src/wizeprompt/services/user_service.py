"""User-level generation defaults ("global parameters"), keyed by model name."""

from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from wizeprompt.exceptions.base import InvalidInputError
from wizeprompt.repositories.user_repository import UserRepository
from wizeprompt.schemas.conversation import UserRead
from wizeprompt.schemas.parameters import GlobalParameters
from wizeprompt.schemas.response import ServiceResponse
from wizeprompt.validators.input_validators import is_positive_id

from .base import service_operation

INVALID_USER_ID = "Invalid user ID"
INVALID_GLOBAL_PARAMETERS = "Invalid global parameters"
USER_NOT_FOUND = "User not found"


@service_operation("user.update_global_parameters")
async def update_global_parameters(
    db: AsyncSession, id_user: int, global_parameters: Any
) -> ServiceResponse[UserRead]:
    """
    Validate and store the user's whole global-parameters mapping (replace, not merge).
    """
    if not is_positive_id(id_user):
        raise InvalidInputError(INVALID_USER_ID, fields=["id_user"])
    try:
        parsed = GlobalParameters.model_validate(global_parameters)
    except ValidationError as exc:
        raise InvalidInputError(INVALID_GLOBAL_PARAMETERS, fields=["global_parameters"]) from exc

    repo = UserRepository(db)
    user = await repo.get_by_id_or_raise(id_user, USER_NOT_FOUND)
    user = await repo.set_global_parameters(user, parsed.to_stored())
    await db.commit()

    return ServiceResponse[UserRead](status=200, data=UserRead.model_validate(user))


@service_operation("user.get_global_parameters")
async def get_global_parameters(db: AsyncSession, id_user: int) -> ServiceResponse[GlobalParameters]:
    if not is_positive_id(id_user):
        raise InvalidInputError(INVALID_USER_ID, fields=["id_user"])

    user = await UserRepository(db).get_by_id_or_raise(id_user, USER_NOT_FOUND)
    return ServiceResponse[GlobalParameters](
        status=200, data=GlobalParameters.model_validate(user.global_parameters)
    )
