"""JSON routes scoped to a user: conversation listing, bulk deactivation, global parameters."""

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from wizeprompt.api.dependencies import DbSession, envelope_response
from wizeprompt.services import conversation_service, user_service

router = APIRouter(prefix="/users/{id_user}", tags=["users"])


@router.get("/conversations")
async def list_conversations(id_user: int, db: DbSession) -> JSONResponse:
    return envelope_response(await conversation_service.get_all_conversations_by_user_id(db, id_user))


@router.post("/conversations/deactivate")
async def deactivate_all_conversations(id_user: int, db: DbSession) -> JSONResponse:
    return envelope_response(await conversation_service.deactivate_all_conversations_by_user_id(db, id_user))


@router.get("/global-parameters")
async def get_global_parameters(id_user: int, db: DbSession) -> JSONResponse:
    return envelope_response(await user_service.get_global_parameters(db, id_user))


@router.put("/global-parameters")
async def put_global_parameters(id_user: int, db: DbSession, payload: Any = Body(...)) -> JSONResponse:
    return envelope_response(await user_service.update_global_parameters(db, id_user, payload))
