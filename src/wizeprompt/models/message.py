from sqlalchemy import ForeignKey, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from enum import Enum as PyEnum
from wizeprompt.database.base import Base, CreatedAtMixin
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .conversation import Conversation


class MessageRole(str, PyEnum):
    """Enum representing the role of the message sender."""
    USER = "user"             # Sent by the user
    ASSISTANT = "assistant"   # Produced by the language model
    SYSTEM = "system"         # System-level messages or instructions


class Message(CreatedAtMixin, Base):
    """
    SQLAlchemy model representing a message in a conversation.

    Messages are append-only and read back in (created_at, id) order.
    """
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    # Stored by value ("user", "assistant", "system")
    role: Mapped[MessageRole] = mapped_column(
        SQLEnum(
            MessageRole,
            name="message_role",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        index=True
    )

    conversation_id: Mapped[int] = mapped_column(
        ForeignKey("conversations.id"),
        nullable=False,
        index=True
    )

    # --- Relationships ---

    conversation: Mapped["Conversation"] = relationship(
        "Conversation",
        back_populates="messages"
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id!r}, role={self.role.value!r}, conversation_id={self.conversation_id!r})>"
