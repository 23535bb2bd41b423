"""Chat and message persistence."""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.chat import ChatAlreadyExistsError
from models.chat import Chat
from models.message import Message

logger = logging.getLogger(__name__)


class ChatService:
    """Service class for chats and their messages."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_chat_by_id(self, chat_id: UUID) -> Optional[Chat]:
        result = await self.db.execute(select(Chat).where(Chat.id == chat_id))
        return result.scalar_one_or_none()

    async def get_chats_by_user_id(self, user_id: UUID) -> List[Chat]:
        stmt = select(Chat).where(Chat.user_id == user_id).order_by(Chat.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def save_chat(self, chat_id: UUID, user_id: UUID, title: str) -> Chat:
        """Insert a chat; a duplicate id raises ``ChatAlreadyExistsError``."""
        chat = Chat(id=chat_id, user_id=user_id, title=title)
        try:
            self.db.add(chat)
            await self.db.commit()
            await self.db.refresh(chat)
            logger.info(f"Created chat {chat_id} for user {user_id}")
            return chat
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Chat {chat_id} already exists")
            raise ChatAlreadyExistsError() from e
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to save chat {chat_id}")
            raise

    async def delete_chat_by_id(self, chat_id: UUID, user_id: UUID) -> bool:
        """Delete a chat owned by ``user_id`` together with its messages."""
        owned = select(Chat.id).where(Chat.id == chat_id, Chat.user_id == user_id)
        try:
            await self.db.execute(delete(Message).where(Message.chat_id.in_(owned)))
            result = await self.db.execute(
                delete(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
            )
            await self.db.commit()
            return result.rowcount > 0
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete chat {chat_id}")
            raise

    async def get_messages_by_chat_id(self, chat_id: UUID) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def save_messages(self, chat_id: UUID, messages: List[Dict[str, Any]]) -> List[Message]:
        """
        Insert messages in the given order.

        Each item carries ``role`` and ``content`` and may carry ``id``. Creation
        times are spaced by a microsecond so a batch keeps its order when read
        back by creation time.
        """
        now = datetime.utcnow()
        rows = [
            Message(
                id=item.get("id") or uuid4(),
                chat_id=chat_id,
                role=item["role"],
                content=item["content"],
                created_at=now + timedelta(microseconds=index),
                updated_at=now,
            )
            for index, item in enumerate(messages)
        ]
        try:
            self.db.add_all(rows)
            await self.db.commit()
            return rows
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to save {len(rows)} messages for chat {chat_id}")
            raise
