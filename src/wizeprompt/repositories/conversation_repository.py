"""
Conversation repository: conversation-specific queries on top of BaseRepository.

Relations are always eager-loaded with `selectinload`; lazy loading is not
available on an AsyncSession. Reads that follow a write in the same session use
`populate_existing` so server-side values (`updated_at`) are reloaded.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.orm import selectinload
import logging

from wizeprompt.models.conversation import Conversation
from wizeprompt.models.language_model import LanguageModel
from wizeprompt.models.tag import Tag, conversation_tags
from wizeprompt.exceptions.base import PersistenceError
from wizeprompt.exceptions.mapper import db_error_handler
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConversationRepository(BaseRepository[Conversation]):
    """
    Repository for Conversation entity operations.

    Adds to the CRUD base:
      - active-only listing per user, with tags and a reduced model projection
      - full detail loading (user, model + provider, messages, tags)
      - tag replacement, parameter overwrite
      - single and bulk deactivation (soft delete)
      - hard delete of the conversation row and its tag links
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create_conversation(
        self,
        user_id: int,
        model_id: int,
        title: str,
        parameters: dict[str, Any] | None = None,
        tags: list[Tag] | None = None,
    ) -> Conversation:
        """
        Insert a new, active conversation and connect the given tags.

        Existence of the user, the model and the tags is checked by the caller.
        """
        async with db_error_handler(self.db, "Conversation"):
            conversation = Conversation(
                user_id=user_id,
                model_id=model_id,
                title=title,
                active=True,
                parameters=parameters or {},
                tags=list(tags or []),
            )
            self.db.add(conversation)
            await self.db.flush()

        logger.info(
            "conversation.create.success",
            extra={
                "conversation_id": conversation.id,
                "user_id": user_id,
                "model_id": model_id,
                "tag_count": len(tags or []),
            },
        )
        return conversation

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_active_by_user(self, user_id: int) -> list[Conversation]:
        """
        Active conversations of a user, most recently updated first.

        Loads tags and `model.provider` (for the model name and provider image);
        messages are not loaded.
        """
        query = (
            select(Conversation)
            .where(Conversation.user_id == user_id, Conversation.active.is_(True))
            .options(
                selectinload(Conversation.tags),
                selectinload(Conversation.model).selectinload(LanguageModel.provider),
            )
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except Exception as e:
            logger.error("conversation.list.failed", extra={"user_id": user_id, "error": str(e)})
            raise PersistenceError(str(e)) from e

        conversations = list(result.scalars().all())
        logger.debug("conversation.list", extra={"user_id": user_id, "count": len(conversations)})
        return conversations

    async def get_detail(self, conversation_id: int) -> Conversation | None:
        """
        A conversation with user, model (+ provider), ordered messages and tags,
        regardless of its `active` flag.
        """
        query = (
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .options(
                selectinload(Conversation.user),
                selectinload(Conversation.model).selectinload(LanguageModel.provider),
                selectinload(Conversation.messages),
                selectinload(Conversation.tags),
            )
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except Exception as e:
            logger.error("conversation.get_detail.failed", extra={"conversation_id": conversation_id, "error": str(e)})
            raise PersistenceError(str(e)) from e
        return result.scalar_one_or_none()

    async def get_with_tags(self, conversation_id: int) -> Conversation | None:
        query = (
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .options(selectinload(Conversation.tags))
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except Exception as e:
            logger.error("conversation.get_with_tags.failed", extra={"conversation_id": conversation_id, "error": str(e)})
            raise PersistenceError(str(e)) from e
        return result.scalar_one_or_none()

    async def reload(self, conversation_id: int) -> Conversation | None:
        """Plain re-select of the row, refreshing server-generated columns."""
        query = (
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except Exception as e:
            raise PersistenceError(str(e)) from e
        return result.scalar_one_or_none()

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def apply_changes(
        self,
        conversation: Conversation,
        title: str | None = None,
        tags: list[Tag] | None = None,
    ) -> Conversation:
        """
        Set the title (when given) and replace the tag set (when given).

        `conversation` must have been loaded with its tags (see get_with_tags).
        """
        async with db_error_handler(self.db, "Conversation"):
            if title is not None:
                conversation.title = title
            if tags is not None:
                conversation.tags = list(tags)
            await self.db.flush()

        logger.info(
            "conversation.update.success",
            extra={
                "conversation_id": conversation.id,
                "title_changed": title is not None,
                "tags_replaced": tags is not None,
            },
        )
        return conversation

    async def set_parameters(self, conversation: Conversation, parameters: dict[str, Any]) -> Conversation:
        """Overwrite the stored parameters wholesale (no merge)."""
        async with db_error_handler(self.db, "Conversation"):
            conversation.parameters = dict(parameters)
            await self.db.flush()

        logger.info(
            "conversation.parameters.updated",
            extra={"conversation_id": conversation.id, "keys": sorted(parameters.keys())},
        )
        return conversation

    async def deactivate(self, conversation: Conversation) -> Conversation:
        async with db_error_handler(self.db, "Conversation"):
            conversation.active = False
            await self.db.flush()

        logger.info("conversation.deactivate.success", extra={"conversation_id": conversation.id})
        return conversation

    async def deactivate_all_by_user(self, user_id: int) -> int:
        """
        Bulk-set `active = false` on every conversation of the user.

        Returns:
            The number of rows the UPDATE matched.
        """
        stmt = (
            update(Conversation)
            .where(Conversation.user_id == user_id)
            .values(active=False)
            .execution_options(synchronize_session="evaluate")
        )
        async with db_error_handler(self.db, "Conversation"):
            result = await self.db.execute(stmt)

        count = result.rowcount or 0
        logger.info("conversation.deactivate_all.success", extra={"user_id": user_id, "count": count})
        return count

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete_tag_links(self, conversation_id: int) -> int:
        stmt = delete(conversation_tags).where(conversation_tags.c.conversation_id == conversation_id)
        async with db_error_handler(self.db, "Conversation"):
            result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def delete_conversation(self, conversation_id: int) -> bool:
        """
        Remove the conversation row and its tag links.

        Messages must already be gone (MessageRepository.delete_conversation_messages);
        both calls are expected to share the caller's transaction.
        """
        links = await self.delete_tag_links(conversation_id)
        deleted = await self.delete(conversation_id)

        logger.info(
            "conversation.delete.rows_removed",
            extra={"conversation_id": conversation_id, "tag_links": links, "deleted": deleted},
        )
        return deleted
