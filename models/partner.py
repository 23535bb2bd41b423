"""
Partner model for businesses listed in the directory.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from .base import BaseModel, JSONType


class Partner(BaseModel):
    """
    Represents a partner business.

    ``main_category`` selects the shape of ``attributes`` (accommodation,
    food_drink, leisure, ...); ``category`` is the finer directory category.
    """

    __tablename__ = "partners"

    name = Column(String(255), nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    subcategory = Column(String(50), nullable=True, index=True)
    main_category = Column(String(50), nullable=True)
    image = Column(String(500), default="")
    gallery = Column(JSONType, default=list)
    short_description = Column(Text, default="")
    long_description = Column(Text, default="")
    location = Column(JSONType, default=dict)
    contact = Column(JSONType, default=dict)
    open_hours = Column(String(255), default="")
    rating = Column(Float, default=0)
    reviews = Column(Integer, default=0)
    price_range = Column(String(50), default="")
    tags = Column(JSONType, default=list)
    features = Column(JSONType, default=list)
    languages = Column(JSONType, default=list)
    payment_options = Column(JSONType, default=dict)
    accessibility = Column(JSONType, default=dict)
    attributes = Column(JSONType, nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_sponsored = Column(Boolean, default=False, nullable=False)
    sponsor_end_date = Column(DateTime, nullable=True)
