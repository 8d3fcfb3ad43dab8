"""JSON routes for conversations: thin wrappers over conversation_service."""

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from wizeprompt.api.dependencies import DbSession, envelope_response
from wizeprompt.services import conversation_service

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", status_code=201)
async def create_conversation(db: DbSession, payload: Any = Body(...)) -> JSONResponse:
    return envelope_response(await conversation_service.create_conversation(db, payload))


@router.get("/{conversation_id}")
async def get_conversation(conversation_id: int, db: DbSession) -> JSONResponse:
    return envelope_response(await conversation_service.get_conversation_by_id(db, conversation_id))


@router.patch("/{conversation_id}")
async def update_conversation(
    conversation_id: int,
    db: DbSession,
    payload: Any = Body(...),
    include_related_entities: bool = False,
) -> JSONResponse:
    return envelope_response(
        await conversation_service.update_conversation_by_id(
            db, conversation_id, payload, include_related_entities=include_related_entities
        )
    )


@router.put("/{conversation_id}/parameters")
async def update_parameters(conversation_id: int, db: DbSession, payload: Any = Body(...)) -> JSONResponse:
    return envelope_response(
        await conversation_service.update_conversation_parameters(db, conversation_id, payload)
    )


@router.post("/{conversation_id}/deactivate")
async def deactivate_conversation(conversation_id: int, db: DbSession) -> JSONResponse:
    return envelope_response(await conversation_service.deactivate_conversation_by_id(db, conversation_id))


@router.delete("/{conversation_id}")
async def delete_conversation(conversation_id: int, db: DbSession) -> JSONResponse:
    return envelope_response(await conversation_service.delete_conversation_by_id(db, conversation_id))
