"""Chat resolution and persistence steps of ``POST /api/chat``."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.security import AuthUser
from app.domains.chat.llm import LanguageModel
from app.domains.chat.messages import format_message_content, sanitize_response_messages
from app.domains.chat.streaming import ResponseSaver, SavedMessages
from app.exceptions.chat import ChatAlreadyExistsError, ChatOwnershipError
from app.schemas.chat import ChatResponse, CoreMessage
from app.services import cached_queries

logger = logging.getLogger(__name__)


def _check_owner(chat: ChatResponse, user: AuthUser) -> ChatResponse:
    if chat.user_id != user.id:
        logger.warning(f"User {user.id} tried to use chat {chat.id} owned by another user")
        raise ChatOwnershipError()
    return chat


async def resolve_chat(
    db: AsyncSession,
    chat_id: UUID,
    user: AuthUser,
    user_message: CoreMessage,
    language_model: LanguageModel,
) -> ChatResponse:
    """
    Return the chat, creating it for ``user`` if it does not exist yet.

    A concurrent create of the same id is recovered by reloading the chat,
    and ownership is checked on whichever row won.
    """
    chat: Optional[ChatResponse] = await cached_queries.get_chat_by_id(db, chat_id)
    if chat is not None:
        return _check_owner(chat, user)

    title = await language_model.generate_title(user_message)
    try:
        return await cached_queries.save_chat(db, chat_id, user.id, title)
    except ChatAlreadyExistsError:
        logger.info(f"Chat {chat_id} was created concurrently, continuing with the existing row")
        chat = await cached_queries.get_chat_by_id(db, chat_id)
        if chat is None:
            raise
        return _check_owner(chat, user)


async def save_user_message(db: AsyncSession, chat_id: UUID, message: CoreMessage) -> UUID:
    message_id = uuid4()
    await cached_queries.save_messages(
        db,
        chat_id,
        [{"id": message_id, "role": message.role.value, "content": format_message_content(message)}],
    )
    return message_id


def response_saver(session_factory: async_sessionmaker[AsyncSession], chat_id: UUID) -> ResponseSaver:
    """
    Persist the finished response in its own session.

    Incomplete tool calls are stripped first and every message gets a fresh id.
    """

    async def save(messages: list[CoreMessage]) -> SavedMessages:
        saved = [(uuid4(), message) for message in sanitize_response_messages(messages)]
        if not saved:
            return saved
        async with session_factory() as db:
            await cached_queries.save_messages(
                db,
                chat_id,
                [
                    {"id": message_id, "role": message.role.value, "content": format_message_content(message)}
                    for message_id, message in saved
                ],
            )
        logger.info(f"Saved {len(saved)} response messages for chat {chat_id}")
        return saved

    return save
