import pytest

from wizeprompt.exceptions.base import InvalidFieldError, NotFoundError
from wizeprompt.models import Message, MessageRole
from wizeprompt.repositories import MessageRepository


@pytest.mark.asyncio
class TestMessageRepository:

    async def test_create_message(self, message_repository: MessageRepository, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])

        message = await message_repository.create_message(conversation.id, "What is a monad?", MessageRole.USER)

        assert isinstance(message, Message)
        assert message.role is MessageRole.USER
        assert message.created_at is not None

    async def test_create_message_accepts_role_value(
        self, message_repository: MessageRepository, created_user, models, create_conversation
    ):
        conversation = await create_conversation(created_user, models[0])

        message = await message_repository.create_message(conversation.id, "Answer", "assistant")

        assert message.role is MessageRole.ASSISTANT

    async def test_create_message_for_missing_conversation(self, message_repository: MessageRepository):
        with pytest.raises(NotFoundError, match="Conversation not found"):
            await message_repository.create_message(404, "lost", MessageRole.USER)

    async def test_pagination(self, message_repository: MessageRepository, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])
        for i in range(5):
            await message_repository.create_message(conversation.id, f"m{i}", MessageRole.USER)

        page = await message_repository.get_conversation_messages(conversation.id, offset=1, limit=2)
        everything = await message_repository.get_conversation_messages(conversation.id)

        assert [m.content for m in page] == ["m1", "m2"]
        assert len(everything) == 5

    async def test_delete_conversation_messages_returns_count(
        self, message_repository: MessageRepository, created_user, models, create_conversation
    ):
        conversation = await create_conversation(created_user, models[0])
        other = await create_conversation(created_user, models[0])
        for text in ("a", "b"):
            await message_repository.create_message(conversation.id, text, MessageRole.USER)
        await message_repository.create_message(other.id, "keep", MessageRole.USER)

        removed = await message_repository.delete_conversation_messages(conversation.id)

        assert removed == 2
        assert await message_repository.count(conversation_id=other.id) == 1
        assert await message_repository.delete_conversation_messages(conversation.id) == 0

    async def test_base_create_rejects_unknown_fields(self, message_repository: MessageRepository):
        with pytest.raises(InvalidFieldError):
            await message_repository.create(conversation_id=1, content="x", role=MessageRole.USER, author="bob")
