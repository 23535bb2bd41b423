"""
Provides the Profile model for the application's database schema.

A profile shares its id with the identity provider's user id. The ``is_admin``
flag gates the dashboard.
"""

from sqlalchemy import Boolean, Column, String, Text

from .base import UUID, BaseModel, JSONType


class Profile(BaseModel):
    """
    Represents a user profile.

    :ivar email: Email address reported by the identity provider.
    :type email: str
    :ivar is_admin: Whether the user may access the dashboard.
    :type is_admin: bool
    """

    __tablename__ = "profiles"

    id = Column(UUID(), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    username = Column(String(100))
    name = Column(String(255))
    avatar = Column(String(500))
    bio = Column(Text)
    location = Column(String(255))
    interests = Column(JSONType, default=list)
    is_admin = Column(Boolean, default=False, nullable=False)
    preferences = Column(JSONType, default=dict)
    notifications = Column(JSONType, default=dict)
    privacy_settings = Column(JSONType, default=dict)
