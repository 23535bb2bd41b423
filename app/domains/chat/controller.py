"""Chat API controller: completion, deletion, history and model list."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db, get_session_factory
from app.core.security import AuthUser
from app.domains.chat.completion import run_completion
from app.domains.chat.flow import resolve_chat, response_saver, save_user_message
from app.domains.chat.llm import LanguageModel, get_language_model
from app.domains.chat.messages import convert_to_core_messages, get_most_recent_user_message
from app.domains.chat.models_registry import MODELS, get_model
from app.domains.chat.prompts import SYSTEM_PROMPT
from app.domains.chat.streaming import buffer_mobile_response, encode_data_stream, is_mobile_client
from app.domains.chat.tools import ToolContext, get_active_tools
from app.exceptions.base import NotFoundError
from app.exceptions.chat import ChatNotFoundError, ChatOwnershipError, ModelNotFoundError, NoUserMessageError
from app.schemas.base import ResponseSchema
from app.schemas.chat import ChatRequest, ModelInfo
from app.services import cached_queries

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, User-Agent",
}


@router.post("/chat")
async def post_chat(
    request: Request,
    chat_request: ChatRequest = Body(...),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    language_model: LanguageModel = Depends(get_language_model),
):
    """Run one assistant turn.

    The user turn is saved before the model runs and the model's messages
    after it finishes. Native mobile clients get a buffered JSON body, other
    clients a data stream.
    """
    model = get_model(chat_request.model_id)
    if model is None:
        raise ModelNotFoundError()

    core_messages = convert_to_core_messages(chat_request.messages)
    user_message = get_most_recent_user_message(core_messages)
    if user_message is None:
        raise NoUserMessageError()

    chat_id = chat_request.id
    await resolve_chat(db, chat_id, current_user, user_message, language_model)
    await save_user_message(db, chat_id, user_message)

    events = run_completion(
        language_model,
        model,
        SYSTEM_PROMPT,
        core_messages,
        get_active_tools(),
        ToolContext(session_factory=session_factory),
        max_steps=settings.chat_max_steps,
        max_duration=settings.chat_max_duration,
    )
    save_response = response_saver(session_factory, chat_id)

    if is_mobile_client(request.headers.get("user-agent")):
        logger.debug(f"Buffered completion for mobile client, chat {chat_id}")
        response = await buffer_mobile_response(events, save_response)
        return JSONResponse(content=response.model_dump(mode="json"), headers=CORS_HEADERS)

    return StreamingResponse(
        encode_data_stream(events, save_response),
        media_type="text/plain; charset=utf-8",
        headers={"X-Vercel-AI-Data-Stream": "v1"},
    )


@router.delete("/chat")
async def delete_chat(
    chat_id: Optional[str] = Query(default=None, alias="id"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not chat_id:
        raise NotFoundError("Not Found")
    try:
        chat_uuid = UUID(chat_id)
    except ValueError as e:
        raise ChatNotFoundError() from e

    chat = await cached_queries.get_chat_by_id(db, chat_uuid)
    if chat is None:
        raise ChatNotFoundError()
    if chat.user_id != current_user.id:
        raise ChatOwnershipError()

    await cached_queries.delete_chat_by_id(db, chat_uuid, current_user.id)
    logger.info(f"Deleted chat {chat_uuid}")
    return PlainTextResponse("Chat deleted", status_code=status.HTTP_200_OK)


@router.options("/chat")
async def chat_preflight():
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.get("/chat/{chat_id}/messages", response_model=ResponseSchema)
async def get_chat_messages(
    chat_id: UUID = Path(..., description="Chat ID"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    chat = await cached_queries.get_chat_by_id(db, chat_id)
    if chat is None:
        raise ChatNotFoundError()
    if chat.user_id != current_user.id:
        raise ChatOwnershipError()

    messages = await cached_queries.get_messages_by_chat_id(db, chat_id)
    return ResponseSchema(
        status="success",
        message="Messages retrieved successfully",
        data=[message.model_dump(mode="json") for message in messages],
    )


@router.get("/history", response_model=ResponseSchema)
async def get_history(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The caller's chats, newest first."""
    chats = await cached_queries.get_chats_by_user_id(db, current_user.id)
    return ResponseSchema(
        status="success",
        message="Chats retrieved successfully",
        data=[chat.model_dump(mode="json") for chat in chats],
    )


@router.get("/models", response_model=ResponseSchema)
async def get_models():
    return ResponseSchema(
        status="success",
        data=[
            ModelInfo(
                id=model.id,
                label=model.label,
                api_identifier=model.api_identifier,
                description=model.description,
            ).model_dump(by_alias=True)
            for model in MODELS
        ],
    )
