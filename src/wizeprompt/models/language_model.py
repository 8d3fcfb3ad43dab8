from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wizeprompt.database.base import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .provider import Provider
    from .conversation import Conversation


class LanguageModel(Base):
    """
    A named generation backend (e.g. "gpt-4").

    The table is called `models`; the class name avoids clashing with pydantic's
    and SQLAlchemy's own "model" vocabulary.
    """
    __tablename__ = "models"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)

    provider_id: Mapped[int] = mapped_column(
        ForeignKey("providers.id"),
        nullable=False,
        index=True
    )

    # --- Relationships ---

    provider: Mapped["Provider"] = relationship("Provider", back_populates="models")

    conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation",
        back_populates="model",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<LanguageModel(id={self.id!r}, name={self.name!r}, provider_id={self.provider_id!r})>"
