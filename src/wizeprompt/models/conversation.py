from sqlalchemy import String, ForeignKey, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import expression
from typing import Any, TYPE_CHECKING
from wizeprompt.database.base import Base, TimestampMixin
from .tag import conversation_tags

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .user import User
    from .language_model import LanguageModel
    from .message import Message
    from .tag import Tag


class Conversation(TimestampMixin, Base):
    """
    SQLAlchemy model for a Conversation.

    A chat thread owned by one user and bound to one language model. `active`
    is the logical-deletion flag: inactive conversations are hidden from list
    views but can still be fetched by id.
    """
    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    model_id: Mapped[int] = mapped_column(
        ForeignKey("models.id"),
        nullable=False,
        index=True
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=expression.true(),
        nullable=False,
        index=True
    )

    # Generation parameters in their serialized (camelCase) form
    parameters: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False
    )

    # --- Relationships ---

    user: Mapped["User"] = relationship(
        "User",
        back_populates="conversations"
    )

    model: Mapped["LanguageModel"] = relationship(
        "LanguageModel",
        back_populates="conversations"
    )

    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        lazy="select",
        order_by="[Message.created_at, Message.id]"
    )

    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=conversation_tags,
        back_populates="conversations",
        lazy="select",
        order_by="Tag.id"
    )

    def __repr__(self) -> str:
        return (
            f"<Conversation(id={self.id!r}, title={self.title!r}, "
            f"user_id={self.user_id!r}, active={self.active!r})>"
        )
