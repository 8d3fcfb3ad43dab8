from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from wizeprompt.models.tag import Tag
from wizeprompt.exceptions.base import NotFoundError, PersistenceError
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TagRepository(BaseRepository[Tag]):

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def create_tag(self, name: str) -> Tag:
        return await self.create(name=name)

    async def get_by_ids(self, tag_ids: list[int]) -> list[Tag]:
        """
        Load the tags for `tag_ids` (duplicates collapsed, input order kept).

        Raises:
            NotFoundError: "Tag(s) not found: <ids>" when any id has no row.
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        try:
            result = await self.db.execute(select(Tag).where(Tag.id.in_(unique_ids)))
        except Exception as e:
            raise PersistenceError(str(e)) from e

        by_id = {tag.id: tag for tag in result.scalars().all()}
        missing = [tag_id for tag_id in unique_ids if tag_id not in by_id]
        if missing:
            logger.info("tag.lookup.missing", extra={"missing_ids": missing})
            raise NotFoundError(
                f"Tag(s) not found: {', '.join(str(i) for i in missing)}",
                fields=["tags"],
            )
        return [by_id[tag_id] for tag_id in unique_ids]
