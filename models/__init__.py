"""
Models package initialization.
"""

from .base import Base, BaseModel
from .catalog import ActivityDetail, BaseItem, ItemType, ServiceDetail
from .chat import Chat
from .event import Event
from .guide import Guide
from .message import Message, MessageRole
from .partner import Partner
from .profile import Profile

__all__ = [
    "Base",
    "BaseModel",
    # Chat models
    "Chat",
    "Message",
    "MessageRole",
    # Directory content
    "Event",
    "Guide",
    "Partner",
    "BaseItem",
    "ActivityDetail",
    "ServiceDetail",
    "ItemType",
    # Users
    "Profile",
]
