"""
Event model for scheduled and recurring happenings on the island.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from .base import BaseModel, JSONType


class Event(BaseModel):
    """
    Represents an event entity.

    An event either happens on a specific date (``time`` carries an ISO date
    prefix) or recurs on a weekday (``recurrence_pattern`` set and ``day``
    holding 0=Sunday..6=Saturday).
    """

    __tablename__ = "events"

    title = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    image = Column(String(500), default="")
    time = Column(String(50), nullable=False, index=True)
    day = Column(Integer, nullable=True, index=True)
    location = Column(String(255), default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    rating = Column(Float, default=0)
    reviews = Column(Integer, default=0)
    price = Column(String(100), default="")
    description = Column(Text, default="")

    organizer_name = Column(String(255))
    organizer_image = Column(String(500))
    organizer_contact_email = Column(String(255))
    organizer_contact_phone = Column(String(100))
    organizer_website = Column(String(500))

    duration = Column(String(100))
    recurrence_pattern = Column(String(50))
    recurrence_custom_pattern = Column(String(255))
    recurrence_end_date = Column(String(50))

    facilities = Column(JSONType)
    tickets = Column(JSONType)
    tags = Column(JSONType, default=list)
    capacity = Column(Integer)
    attendee_count = Column(Integer, default=0)

    is_sponsored = Column(Boolean, default=False)
    sponsor_end_date = Column(DateTime, nullable=True)
