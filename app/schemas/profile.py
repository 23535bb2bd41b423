"""Profile schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema


class ProfileResponse(BaseSchema):
    id: UUID
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    is_admin: bool = False
    preferences: dict[str, Any] = Field(default_factory=dict)
    notifications: dict[str, Any] = Field(default_factory=dict)
    privacy_settings: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseSchema):
    username: Optional[str] = Field(default=None, max_length=100)
    name: Optional[str] = Field(default=None, max_length=255)
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    interests: Optional[list[str]] = None
    preferences: Optional[dict[str, Any]] = None
    notifications: Optional[dict[str, Any]] = None
    privacy_settings: Optional[dict[str, Any]] = None
