#  Agent Dashboard - Chat Routes
#
#  Chat sessions, message history, the chat turn and the model catalog.
#  Session-scoped endpoints only expose the caller's own sessions.
#
#  Depends on: container.py, models/schemas.py, middleware/auth.py, rate_limit.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends
from starlette.requests import Request

from dashboard.container import Container
from dashboard.exceptions import NotFoundError, internal_errors
from dashboard.middleware.auth import get_current_user
from dashboard.models.schemas import (
    ChatMessageOut,
    ChatModelOut,
    ChatSessionOut,
    SendMessageRequest,
    SendMessageResponse,
    SessionCreate,
    SessionCreated,
)
from dashboard.rate_limit import chat_limit, limiter
from dashboard.services.chat import ChatService
from dashboard.services.model_catalog import available_chat_models

router = APIRouter(prefix="/chat", tags=["chat"])


async def _get_owned_session(chat: ChatService, session_id: int, user: dict) -> dict:
    """Fetch a session owned by the caller. Raises NotFoundError otherwise."""
    with internal_errors("Failed to fetch chat session"):
        session = await chat.get_session(session_id)
    # Admins can read any session; others only their own
    if not session or (user.get("role") != "admin" and session["user_id"] != user["id"]):
        raise NotFoundError(f"Chat session {session_id} not found")
    return session


@router.post("/sessions", status_code=201)
@inject
async def create_session(
    body: SessionCreate,
    current_user: dict = Depends(get_current_user),
    chat: ChatService = Depends(Provide[Container.chat]),
) -> SessionCreated:
    with internal_errors("Failed to create chat session"):
        session_id = await chat.create_session(current_user["id"], body.model_used, body.title)
    return SessionCreated(session_id=session_id)


@router.get("/sessions")
@inject
async def list_sessions(
    current_user: dict = Depends(get_current_user),
    chat: ChatService = Depends(Provide[Container.chat]),
) -> list[ChatSessionOut]:
    """The caller's sessions, newest first."""
    with internal_errors("Failed to fetch chat sessions"):
        rows = await chat.list_sessions(current_user["id"])
    return [ChatSessionOut(**r) for r in rows]


@router.get("/sessions/{session_id}/messages")
@inject
async def list_messages(
    session_id: int,
    current_user: dict = Depends(get_current_user),
    chat: ChatService = Depends(Provide[Container.chat]),
) -> list[ChatMessageOut]:
    await _get_owned_session(chat, session_id, current_user)
    with internal_errors("Failed to fetch chat messages"):
        rows = await chat.list_messages(session_id)
    return [ChatMessageOut(**r) for r in rows]


@router.post("/messages")
@limiter.limit(chat_limit)
@inject
async def send_message(
    request: Request,
    body: SendMessageRequest,
    current_user: dict = Depends(get_current_user),
    chat: ChatService = Depends(Provide[Container.chat]),
) -> SendMessageResponse:
    """Send a message and return the model's reply.

    The user message and the reply are two separate writes; a failed model
    call leaves the user message in the log.
    """
    await _get_owned_session(chat, body.session_id, current_user)
    with internal_errors("Failed to process chat message"):
        result = await chat.send_message(body.session_id, body.message, body.model)
    return SendMessageResponse(**result)


@router.get("/models")
async def list_models() -> list[ChatModelOut]:
    return available_chat_models()
