"""
Message repository: append and read conversation messages, and bulk-remove
them when their conversation is hard-deleted.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from wizeprompt.models.conversation import Conversation
from wizeprompt.models.message import Message, MessageRole
from wizeprompt.exceptions.base import PersistenceError
from wizeprompt.exceptions.mapper import db_error_handler
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def create_message(
        self,
        conversation_id: int,
        content: str,
        role: MessageRole,
    ) -> Message:
        """
        Append a message to a conversation.

        Raises:
            NotFoundError: If the conversation does not exist.
        """
        await BaseRepository(Conversation, self.db).get_by_id_or_raise(
            conversation_id, "Conversation not found"
        )
        return await self.create(
            conversation_id=conversation_id,
            content=content,
            role=MessageRole(role),
        )

    async def get_conversation_messages(
        self,
        conversation_id: int,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Message]:
        """Messages of a conversation, oldest first (created_at, then id)."""
        query = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at, Message.id)
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await self.db.execute(query)
        except Exception as e:
            logger.error("message.list.failed", extra={"conversation_id": conversation_id, "error": str(e)})
            raise PersistenceError(str(e)) from e
        return list(result.scalars().all())

    async def delete_conversation_messages(self, conversation_id: int) -> int:
        """
        Delete all messages in a conversation.

        Returns:
            The number of messages deleted.
        """
        stmt = delete(Message).where(Message.conversation_id == conversation_id)
        async with db_error_handler(self.db, "Message"):
            result = await self.db.execute(stmt)

        deleted_count = result.rowcount or 0
        logger.info(
            "message.delete_for_conversation.success",
            extra={"conversation_id": conversation_id, "count": deleted_count},
        )
        return deleted_count
