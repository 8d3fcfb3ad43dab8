from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
import logging

from wizeprompt.models.language_model import LanguageModel
from wizeprompt.models.provider import Provider
from wizeprompt.exceptions.base import PersistenceError
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProviderRepository(BaseRepository[Provider]):

    def __init__(self, db: AsyncSession):
        super().__init__(Provider, db)

    async def create_provider(self, name: str, image: str | None = None) -> Provider:
        return await self.create(name=name, image=image)


class LanguageModelRepository(BaseRepository[LanguageModel]):

    def __init__(self, db: AsyncSession):
        super().__init__(LanguageModel, db)

    async def create_model(self, name: str, provider_id: int) -> LanguageModel:
        return await self.create(name=name, provider_id=provider_id)

    async def get_with_provider(self, model_id: int) -> LanguageModel | None:
        query = (
            select(LanguageModel)
            .where(LanguageModel.id == model_id)
            .options(selectinload(LanguageModel.provider))
        )
        try:
            result = await self.db.execute(query)
        except Exception as e:
            logger.error("model.get.failed", extra={"model_id": model_id, "error": str(e)})
            raise PersistenceError(str(e)) from e
        return result.scalar_one_or_none()
