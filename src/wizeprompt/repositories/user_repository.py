"""
User repository: user rows and their per-model global generation parameters.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from wizeprompt.models.user import User
from wizeprompt.exceptions.base import PersistenceError
from wizeprompt.exceptions.mapper import db_error_handler
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(
        self,
        username: str,
        email: str,
        image: str | None = None,
        global_parameters: dict[str, Any] | None = None,
    ) -> User:
        """
        Create a user. Username and email are normalized (stripped, email lower-cased);
        duplicates raise DuplicateError from the base pre-check.
        """
        return await self.create(
            username=username.strip(),
            email=email.strip().lower(),
            image=image,
            global_parameters=global_parameters,
        )

    async def get_by_username(self, username: str) -> User | None:
        try:
            result = await self.db.execute(select(User).where(User.username == username))
        except Exception as e:
            raise PersistenceError(str(e)) from e
        return result.scalar_one_or_none()

    async def set_global_parameters(self, user: User, global_parameters: dict[str, Any]) -> User:
        """Replace the stored mapping and return the user with fresh server columns."""
        async with db_error_handler(self.db, "User"):
            user.global_parameters = dict(global_parameters)
            await self.db.flush()
            await self.db.refresh(user)

        logger.info(
            "user.global_parameters.updated",
            extra={"user_id": user.id, "models": sorted(global_parameters.keys())},
        )
        return user
