from sqlalchemy import String, Table, Column, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wizeprompt.database.base import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .conversation import Conversation


# Many-to-many link between conversations and tags.
# Both sides cascade so removing either end never leaves dangling links.
conversation_tags = Table(
    "conversation_tags",
    Base.metadata,
    Column(
        "conversation_id",
        ForeignKey("conversations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Tag(Base):
    """User-facing label attached to conversations."""
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation",
        secondary=conversation_tags,
        back_populates="tags",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id!r}, name={self.name!r})>"
