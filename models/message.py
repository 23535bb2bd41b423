"""
Message model for chat turns.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class MessageRole(str, enum.Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class Message(BaseModel):
    """
    Represents a single persisted chat turn.

    ``content`` holds the raw text for user turns and a JSON array of typed
    content blocks (text, tool-call, tool-result) for assistant and tool turns.
    """

    __tablename__ = "messages"

    chat_id = Column(UUID(), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(MessageRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    content = Column(Text, nullable=False)

    chat = relationship("Chat", back_populates="messages")
