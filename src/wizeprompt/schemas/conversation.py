"""Request and response schemas for conversations and their related rows."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, ConfigDict

from wizeprompt.models.message import MessageRole

from .base import CamelModel


# ── Input schemas ──────────────────────────────────────────────────────────────

class TagRef(CamelModel):
    id: int


def _coerce_tag_refs(value: Any) -> Any:
    # Accept bare ids ([1, 2]) as well as objects ([{"id": 1}]).
    if isinstance(value, list):
        return [
            {"id": item} if isinstance(item, int) and not isinstance(item, bool) else item
            for item in value
        ]
    return value


TagRefs = Annotated[list[TagRef], BeforeValidator(_coerce_tag_refs)]


class ConversationCreate(CamelModel):
    """
    Payload for create_conversation.

    `parameters` and `active` sent by callers are ignored: parameters come from
    the user's global defaults (or start empty) and new conversations are active.
    """
    model_config = ConfigDict(extra="ignore")

    id_user: int
    id_model: int
    title: str
    # null is treated like an empty list
    tags: TagRefs | None = None
    use_global_parameters: bool = False

    @property
    def tag_ids(self) -> list[int]:
        return [tag.id for tag in self.tags or []]


class ConversationUpdate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    # None leaves tags alone; a list (even empty) replaces them.
    tags: TagRefs | None = None

    @property
    def tag_ids(self) -> list[int] | None:
        if self.tags is None:
            return None
        return [tag.id for tag in self.tags]


# ── Output schemas ─────────────────────────────────────────────────────────────

class TagRead(CamelModel):
    id: int
    name: str


class ProviderRead(CamelModel):
    id: int
    name: str
    image: str | None = None


class ProviderImage(CamelModel):
    image: str | None = None


class LanguageModelRead(CamelModel):
    id: int
    name: str
    provider_id: int
    provider: ProviderRead


class ModelSummary(CamelModel):
    """Reduced model projection used by list views."""
    name: str
    provider: ProviderImage


class UserRead(CamelModel):
    id: int
    username: str
    email: str
    image: str | None = None
    global_parameters: dict[str, Any] | None = None


class MessageRead(CamelModel):
    id: int
    conversation_id: int
    role: MessageRole
    content: str
    created_at: datetime


class ConversationRead(CamelModel):
    id: int
    user_id: int
    model_id: int
    title: str
    active: bool
    parameters: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class ConversationWithTags(ConversationRead):
    tags: list[TagRead] = []


class ConversationSummary(ConversationWithTags):
    model: ModelSummary


class ConversationDetail(ConversationWithTags):
    user: UserRead
    model: LanguageModelRead
    messages: list[MessageRead] = []


class CountResult(CamelModel):
    count: int
