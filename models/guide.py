"""
Guide model for editorial travel guides.
"""

from sqlalchemy import Boolean, Column, DateTime, String
from datetime import datetime

from .base import BaseModel, JSONType


class Guide(BaseModel):
    """
    Represents a guide entity.

    Sections, related contacts and practical info are stored as JSON documents
    whose shapes are validated by the guide schemas.
    """

    __tablename__ = "guides"

    name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    slug = Column(String(255), unique=True, nullable=True)
    images = Column(JSONType, default=dict)
    description = Column(JSONType, default=dict)
    location = Column(JSONType, default=dict)
    sections = Column(JSONType, default=list)
    related_contacts = Column(JSONType, default=list)
    practical_info = Column(JSONType, default=dict)
    tags = Column(JSONType, default=list)
    features = Column(JSONType, default=list)
    is_featured = Column(Boolean, default=False, nullable=False)
    last_updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
