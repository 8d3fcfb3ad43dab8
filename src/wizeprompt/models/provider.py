from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wizeprompt.database.base import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .language_model import LanguageModel


class Provider(Base):
    """A vendor of language models (its logo is the assistant avatar)."""
    __tablename__ = "providers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    models: Mapped[list["LanguageModel"]] = relationship(
        "LanguageModel",
        back_populates="provider",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Provider(id={self.id!r}, name={self.name!r})>"
