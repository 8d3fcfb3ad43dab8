from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Any, TYPE_CHECKING
from wizeprompt.database.base import Base, TimestampMixin

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .conversation import Conversation


class User(TimestampMixin, Base):
    """
    SQLAlchemy model for User.

    Owns conversations and keeps the per-model default generation parameters
    (`global_parameters`, keyed by model name) used when a conversation is
    created with "use global parameters".
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False
    )

    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False
    )

    # Avatar URL shown next to the user's messages
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # {"<model name>": {"userContext": ..., "responseContext": ..., "temperature": ...}}
    global_parameters: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # --- Relationships ---

    conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, username={self.username!r}, email={self.email!r})>"
