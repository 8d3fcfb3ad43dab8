"""
ConversationLayout: the page shell plus the HTML routes for a conversation.

    GET  /conversation/{id}              layout + message list + parameters modal
    POST /conversation/{id}/parameters   form post from the modal (303 back on success)
"""

import logging

from fastapi import APIRouter, Form
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from wizeprompt.api.dependencies import DbSession
from wizeprompt.schemas.conversation import ConversationDetail
from wizeprompt.schemas.parameters import GlobalParameters, ModelParameters
from wizeprompt.services import conversation_service

from .message_list import MessageList
from .parameters_modal import ParametersModal
from .rendering import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversation", tags=["pages"], include_in_schema=False)


def render_layout(content: str) -> str:
    """Wrap already-rendered content in the WizePrompt shell."""
    return render("layout.html", content=content)


def build_modal(conversation: ConversationDetail, **kwargs) -> ParametersModal:
    try:
        global_entry = GlobalParameters.entry_for(conversation.user.global_parameters, conversation.model.name)
    except ValueError:
        logger.warning(
            "ui.global_parameters.unreadable",
            extra={"conversation_id": conversation.id, "model": conversation.model.name},
        )
        global_entry = None
    return ParametersModal.from_stored(
        conversation.parameters,
        global_parameters=global_entry,
        action=f"/conversation/{conversation.id}/parameters",
        **kwargs,
    )


def render_conversation_page(
    conversation: ConversationDetail,
    modal: ParametersModal | None = None,
    error: str | None = None,
) -> str:
    messages = MessageList(
        conversation.messages,
        user_image=conversation.user.image,
        provider_image=conversation.model.provider.image,
    )
    modal = modal or build_modal(conversation)
    content = render(
        "conversation.html",
        conversation=conversation,
        message_list_html=messages.render(),
        modal_html=modal.render(error=error),
    )
    return render_layout(content)


def render_error_page(status: int, message: str | None) -> HTMLResponse:
    content = render("error.html", status=status, message=message or "")
    return HTMLResponse(render_layout(content), status_code=status)


@router.get("/{conversation_id}", response_class=HTMLResponse)
async def conversation_page(conversation_id: int, db: DbSession) -> Response:
    result = await conversation_service.get_conversation_by_id(db, conversation_id)
    if not result.ok:
        return render_error_page(result.status, result.message)
    return HTMLResponse(render_conversation_page(result.data))


@router.post("/{conversation_id}/parameters")
async def save_conversation_parameters(
    conversation_id: int,
    db: DbSession,
    user_context: str = Form(""),
    response_context: str = Form(""),
    temperature: float = Form(...),
    use_global_context: bool = Form(False),
) -> Response:
    current = await conversation_service.get_conversation_by_id(db, conversation_id)
    if not current.ok:
        return render_error_page(current.status, current.message)

    async def save_parameters(parameters: ModelParameters):
        return await conversation_service.update_conversation_parameters(db, conversation_id, parameters)

    modal = build_modal(current.data, save_parameters=save_parameters, is_open=True)
    modal.edit_user_context(user_context)
    modal.edit_response_context(response_context)
    modal.toggle_global_context(use_global_context)
    try:
        modal.set_temperature(temperature)
    except ValueError as exc:
        logger.info("page.parameters.invalid_temperature", extra={"conversation_id": conversation_id})
        return HTMLResponse(render_conversation_page(current.data, modal, error=str(exc)), status_code=400)

    saved = await modal.save()
    if saved.ok:
        return RedirectResponse(f"/conversation/{conversation_id}", status_code=303)

    modal.open()
    return HTMLResponse(
        render_conversation_page(current.data, modal, error=saved.message),
        status_code=saved.status,
    )
