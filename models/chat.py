"""
Chat model for assistant conversations.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Chat(BaseModel):
    """
    Represents a conversation owned by a single user.

    The id is chosen by the client so the first request can address the chat
    before it exists. Only the title is ever changed after creation.
    """

    __tablename__ = "chats"

    user_id = Column(UUID(), nullable=False, index=True)
    title = Column(String(255), nullable=True)

    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )
