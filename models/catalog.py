"""
Base item, activity and service models.

Every activity or service is split across two rows sharing one id: the
``base_items`` row with the fields common to all listings and a detail row in
``activities`` or ``services`` carrying the category-specific data.
"""

import enum

from sqlalchemy import Boolean, Column, Enum, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, JSONType


class ItemType(str, enum.Enum):
    ACTIVITY = "activity"
    SERVICE = "service"


class BaseItem(BaseModel):
    """Fields shared by every activity and service listing."""

    __tablename__ = "base_items"

    name = Column(String(255), nullable=False, index=True)
    type = Column(Enum(ItemType, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    short_description = Column(Text, default="")
    long_description = Column(Text, default="")
    main_image = Column(String(500), default="")
    gallery_images = Column(JSONType, default=list)
    address = Column(String(500), default="")
    coordinates = Column(JSONType, nullable=True)
    area = Column(String(100), default="", index=True)
    contact_info = Column(JSONType, default=dict)
    hours = Column(JSONType, default=dict)
    open_24h = Column(Boolean, default=False)
    rating = Column(Float, default=0)
    tags = Column(JSONType, default=list)
    price_range = Column(String(50), default="")
    currency = Column(String(10), default="THB")
    features = Column(JSONType, default=list)
    languages = Column(JSONType, default=list)
    payment_methods = Column(JSONType, default=list)
    accessibility = Column(JSONType, default=dict)
    is_sponsored = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)

    activity = relationship("ActivityDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    service = relationship("ServiceDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True)


class ActivityDetail(BaseModel):
    """Activity-specific half of an activity listing."""

    __tablename__ = "activities"

    id = Column(UUID(), ForeignKey("base_items.id", ondelete="CASCADE"), primary_key=True)
    category = Column(String(50), nullable=False, index=True)
    subcategory = Column(String(50), nullable=True, index=True)
    activity_data = Column(JSONType, default=dict)


class ServiceDetail(BaseModel):
    """Service-specific half of a service listing."""

    __tablename__ = "services"

    id = Column(UUID(), ForeignKey("base_items.id", ondelete="CASCADE"), primary_key=True)
    category = Column(String(50), nullable=False, index=True)
    subcategory = Column(String(50), nullable=True, index=True)
    service_data = Column(JSONType, default=dict)
