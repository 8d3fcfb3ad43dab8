"""
Conversation operations.

Every function takes the AsyncSession first and returns a ServiceResponse
envelope `{status, data?, message?}`:

    400  invalid input (checked before touching the database)
    404  missing user / model / conversation / tags, or an empty result
    200  success (201 for create)
    500  unexpected failure, with the underlying error text

Writes commit on success; any failure rolls the whole operation back.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from wizeprompt.exceptions.base import InvalidInputError, NotFoundError
from wizeprompt.repositories.conversation_repository import ConversationRepository
from wizeprompt.repositories.language_model_repository import LanguageModelRepository
from wizeprompt.repositories.message_repository import MessageRepository
from wizeprompt.repositories.tag_repository import TagRepository
from wizeprompt.repositories.user_repository import UserRepository
from wizeprompt.schemas.conversation import (
    ConversationCreate,
    ConversationDetail,
    ConversationRead,
    ConversationSummary,
    ConversationUpdate,
    ConversationWithTags,
    CountResult,
)
from wizeprompt.schemas.parameters import GlobalParameters
from wizeprompt.schemas.response import ServiceResponse
from wizeprompt.validators.input_validators import is_positive_id
from wizeprompt.validators.model_parameters import are_valid_model_parameters, parse_model_parameters

from .base import service_operation

logger = logging.getLogger(__name__)

INVALID_USER_ID = "Invalid user ID"
INVALID_CONVERSATION_ID = "Invalid conversation ID"
INVALID_CREATE_INPUT = "Invalid input for creating conversation"
INVALID_UPDATE_INPUT = "Invalid input for updating conversation"
INVALID_PARAMETERS = "Invalid model parameters"
EMPTY_TITLE = "Title cannot be empty"
USER_NOT_FOUND = "User not found"
USER_ID_NOT_FOUND = "User ID does not exist"
MODEL_NOT_FOUND = "Model not found"
CONVERSATION_NOT_FOUND = "Conversation not found"
NO_CONVERSATIONS = "No conversations found for this user"
DEACTIVATED = "Conversation marked as inactive"
ALL_DEACTIVATED = "Conversations marked as inactive"
DELETED = "Conversation and associated messages successfully deleted"


def _require_conversation_id(conversation_id: Any) -> None:
    if not is_positive_id(conversation_id):
        raise InvalidInputError(INVALID_CONVERSATION_ID, fields=["id"])


def _parse_create(data: ConversationCreate | Mapping[str, Any]) -> ConversationCreate:
    if isinstance(data, ConversationCreate):
        return data
    try:
        return ConversationCreate.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(INVALID_CREATE_INPUT) from exc


def _parse_update(updated_info: ConversationUpdate | Mapping[str, Any]) -> ConversationUpdate:
    if isinstance(updated_info, ConversationUpdate):
        return updated_info
    try:
        return ConversationUpdate.model_validate(updated_info)
    except ValidationError as exc:
        raise InvalidInputError(INVALID_UPDATE_INPUT) from exc


@service_operation("conversation.list_by_user")
async def get_all_conversations_by_user_id(
    db: AsyncSession, id_user: int
) -> ServiceResponse[list[ConversationSummary]]:
    """
    Active conversations of a user with their tags and a reduced model view
    (model name, provider image), most recently updated first.
    """
    if not is_positive_id(id_user):
        raise InvalidInputError(INVALID_USER_ID, fields=["id_user"])

    if not await UserRepository(db).exists(id_user):
        raise NotFoundError(USER_NOT_FOUND)

    conversations = await ConversationRepository(db).get_active_by_user(id_user)
    if not conversations:
        raise NotFoundError(NO_CONVERSATIONS)

    return ServiceResponse[list[ConversationSummary]](
        status=200,
        data=[ConversationSummary.model_validate(c) for c in conversations],
    )


@service_operation("conversation.get")
async def get_conversation_by_id(db: AsyncSession, conversation_id: int) -> ServiceResponse[ConversationDetail]:
    """Full conversation (user, model, messages, tags), active or not."""
    _require_conversation_id(conversation_id)

    conversation = await ConversationRepository(db).get_detail(conversation_id)
    if conversation is None:
        raise NotFoundError(CONVERSATION_NOT_FOUND)

    return ServiceResponse[ConversationDetail](
        status=200, data=ConversationDetail.model_validate(conversation)
    )


@service_operation("conversation.create")
async def create_conversation(
    db: AsyncSession, data: ConversationCreate | Mapping[str, Any]
) -> ServiceResponse[ConversationDetail]:
    """
    Create an active conversation for an existing user and model.

    With `use_global_parameters`, the user's global entry for the model's name
    seeds `parameters`; otherwise it starts as `{}`.
    """
    payload = _parse_create(data)
    if not (payload.id_user and payload.id_model and payload.title):
        raise InvalidInputError(INVALID_CREATE_INPUT)

    user = await UserRepository(db).get_by_id_or_raise(payload.id_user, USER_NOT_FOUND)
    model = await LanguageModelRepository(db).get_by_id_or_raise(payload.id_model, MODEL_NOT_FOUND)
    tags = await TagRepository(db).get_by_ids(payload.tag_ids)

    parameters: dict[str, Any] = {}
    if payload.use_global_parameters:
        entry = GlobalParameters.entry_for(user.global_parameters, model.name)
        if entry is not None:
            parameters = entry.to_stored()

    repo = ConversationRepository(db)
    conversation = await repo.create_conversation(
        user_id=user.id,
        model_id=model.id,
        title=payload.title,
        parameters=parameters,
        tags=tags,
    )
    await db.commit()

    created = await repo.get_detail(conversation.id)
    return ServiceResponse[ConversationDetail](
        status=201, data=ConversationDetail.model_validate(created)
    )


@service_operation("conversation.update")
async def update_conversation_by_id(
    db: AsyncSession,
    conversation_id: int,
    updated_info: ConversationUpdate | Mapping[str, Any],
    include_related_entities: bool = False,
) -> ServiceResponse[ConversationDetail | ConversationWithTags]:
    """
    Update title and/or tags.

    The title is applied only when non-empty; a whitespace-only title is
    rejected. Tags, when provided (even as an empty list), replace the current set.
    """
    _require_conversation_id(conversation_id)
    payload = _parse_update(updated_info)

    if payload.title and not payload.title.strip():
        raise InvalidInputError(EMPTY_TITLE, fields=["title"])

    repo = ConversationRepository(db)
    conversation = await repo.get_with_tags(conversation_id)
    if conversation is None:
        raise NotFoundError(CONVERSATION_NOT_FOUND)

    tag_ids = payload.tag_ids
    tags = await TagRepository(db).get_by_ids(tag_ids) if tag_ids is not None else None

    await repo.apply_changes(conversation, title=payload.title or None, tags=tags)
    await db.commit()

    if include_related_entities:
        detail = await repo.get_detail(conversation_id)
        return ServiceResponse[ConversationDetail](status=200, data=ConversationDetail.model_validate(detail))

    updated = await repo.get_with_tags(conversation_id)
    return ServiceResponse[ConversationWithTags](status=200, data=ConversationWithTags.model_validate(updated))


@service_operation("conversation.update_parameters")
async def update_conversation_parameters(
    db: AsyncSession, conversation_id: int, parameters: Any
) -> ServiceResponse[ConversationRead]:
    """Replace the conversation's generation parameters with a validated record."""
    if not are_valid_model_parameters(parameters):
        raise InvalidInputError(INVALID_PARAMETERS, fields=["parameters"])
    _require_conversation_id(conversation_id)

    repo = ConversationRepository(db)
    conversation = await repo.get_by_id_or_raise(conversation_id, CONVERSATION_NOT_FOUND)

    await repo.set_parameters(conversation, parse_model_parameters(parameters).to_stored())
    await db.commit()

    updated = await repo.reload(conversation_id)
    return ServiceResponse[ConversationRead](status=200, data=ConversationRead.model_validate(updated))


@service_operation("conversation.deactivate")
async def deactivate_conversation_by_id(db: AsyncSession, conversation_id: int) -> ServiceResponse[None]:
    """Soft delete: hide from list views, keep the row and everything attached."""
    _require_conversation_id(conversation_id)

    repo = ConversationRepository(db)
    conversation = await repo.get_by_id_or_raise(conversation_id, CONVERSATION_NOT_FOUND)

    await repo.deactivate(conversation)
    await db.commit()

    return ServiceResponse[None](status=200, message=DEACTIVATED)


@service_operation("conversation.deactivate_all")
async def deactivate_all_conversations_by_user_id(db: AsyncSession, id_user: int) -> ServiceResponse[CountResult]:
    """
    Soft-delete every conversation of a user.

    Zero matched rows is reported as 404, like an unknown user.
    """
    if not is_positive_id(id_user) or not await UserRepository(db).exists(id_user):
        raise NotFoundError(USER_ID_NOT_FOUND)

    count = await ConversationRepository(db).deactivate_all_by_user(id_user)
    if count == 0:
        raise NotFoundError(NO_CONVERSATIONS)

    await db.commit()
    return ServiceResponse[CountResult](status=200, data=CountResult(count=count), message=ALL_DEACTIVATED)


@service_operation("conversation.delete")
async def delete_conversation_by_id(db: AsyncSession, conversation_id: int) -> ServiceResponse[None]:
    """
    Hard delete: messages, then tag links, then the conversation row, in one
    transaction. Irreversible.
    """
    _require_conversation_id(conversation_id)

    repo = ConversationRepository(db)
    if not await repo.exists(conversation_id):
        raise NotFoundError(CONVERSATION_NOT_FOUND)

    removed_messages = await MessageRepository(db).delete_conversation_messages(conversation_id)
    await repo.delete_conversation(conversation_id)
    await db.commit()

    logger.info(
        "conversation.delete.committed",
        extra={"conversation_id": conversation_id, "messages_removed": removed_messages},
    )
    return ServiceResponse[None](status=200, message=DELETED)
