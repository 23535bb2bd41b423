"""Event schemas and the mapping between nested and flat event shapes."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema


class EventCategory(str, Enum):
    MUSIC = "Music"
    ART = "Art"
    FOOD = "Food"
    SPORTS = "Sports"
    MARKETS = "Markets"
    NIGHTLIFE = "Nightlife"
    CULTURE = "Culture"
    COMEDY = "Comedy"
    WELLNESS = "Wellness"
    EDUCATION = "Education"
    OTHER = "Other"


class Coordinates(BaseSchema):
    latitude: float
    longitude: float


class EventOrganizer(BaseSchema):
    name: str
    image: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, alias="contactEmail")
    contact_phone: Optional[str] = Field(default=None, alias="contactPhone")
    website: Optional[str] = None


class EventRecurrence(BaseSchema):
    pattern: Literal["once", "daily", "weekly", "monthly", "yearly", "custom"]
    custom_pattern: Optional[str] = Field(default=None, alias="customPattern")
    end_date: Optional[str] = Field(default=None, alias="endDate")


class EventFacilities(BaseSchema):
    parking: Optional[bool] = None
    atm: Optional[bool] = None
    food_available: Optional[bool] = Field(default=None, alias="foodAvailable")
    toilets: Optional[bool] = None
    wheelchair: Optional[bool] = None
    wifi: Optional[bool] = None
    pet_friendly: Optional[bool] = Field(default=None, alias="petFriendly")
    child_friendly: Optional[bool] = Field(default=None, alias="childFriendly")


class TicketType(BaseSchema):
    name: str
    price: str
    description: Optional[str] = None


class EventTickets(BaseSchema):
    url: Optional[str] = None
    available_count: Optional[int] = Field(default=None, alias="availableCount")
    types: list[TicketType] = Field(default_factory=list)


class EventBase(BaseSchema):
    """Application shape of an event."""

    title: str = Field(..., min_length=1, max_length=255)
    category: EventCategory
    image: str = ""
    time: str = Field(..., description="ISO datetime for dated events, or a time of day")
    day: Optional[int] = Field(default=None, ge=0, le=6, description="0=Sunday .. 6=Saturday")
    location: str = ""
    coordinates: Optional[Coordinates] = None
    rating: float = 0
    reviews: int = 0
    price: str = ""
    description: str = ""
    organizer: Optional[EventOrganizer] = None
    duration: Optional[str] = None
    recurrence: Optional[EventRecurrence] = None
    facilities: Optional[EventFacilities] = None
    tickets: Optional[EventTickets] = None
    tags: list[str] = Field(default_factory=list)
    capacity: Optional[int] = Field(default=None, ge=0)
    attendee_count: int = Field(default=0, alias="attendeeCount")
    is_sponsored: bool = Field(default=False, alias="isSponsored")
    sponsor_end_date: Optional[datetime] = Field(default=None, alias="sponsorEndDate")


class EventCreate(EventBase):
    pass


class EventUpdate(BaseSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[EventCategory] = None
    image: Optional[str] = None
    time: Optional[str] = None
    day: Optional[int] = Field(default=None, ge=0, le=6)
    location: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    price: Optional[str] = None
    description: Optional[str] = None
    organizer: Optional[EventOrganizer] = None
    duration: Optional[str] = None
    recurrence: Optional[EventRecurrence] = None
    facilities: Optional[EventFacilities] = None
    tickets: Optional[EventTickets] = None
    tags: Optional[list[str]] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    attendee_count: Optional[int] = Field(default=None, alias="attendeeCount")
    is_sponsored: Optional[bool] = Field(default=None, alias="isSponsored")
    sponsor_end_date: Optional[datetime] = Field(default=None, alias="sponsorEndDate")


class EventResponse(EventBase):
    id: UUID
    category: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class EventFilter(BaseSchema):
    search: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[list[str]] = None
    location: Optional[str] = None


_FLAT_ONLY = ("coordinates", "organizer", "recurrence", "facilities", "tickets")


def event_to_row(event: EventBase | EventUpdate, partial: bool = False) -> dict[str, Any]:
    """Flatten the nested application shape into ``events`` column values.

    With ``partial`` only fields explicitly set on the schema are returned, so
    an update never blanks columns the caller did not send.
    """
    data = event.model_dump(exclude_unset=partial)
    row = {key: value for key, value in data.items() if key not in _FLAT_ONLY}
    if "category" in row and isinstance(event.category, Enum):
        row["category"] = event.category.value

    if "coordinates" in data:
        coordinates = data["coordinates"] or {}
        row["latitude"] = coordinates.get("latitude")
        row["longitude"] = coordinates.get("longitude")

    if "organizer" in data:
        organizer = data["organizer"] or {}
        row["organizer_name"] = organizer.get("name")
        row["organizer_image"] = organizer.get("image")
        row["organizer_contact_email"] = organizer.get("contact_email")
        row["organizer_contact_phone"] = organizer.get("contact_phone")
        row["organizer_website"] = organizer.get("website")

    if "recurrence" in data:
        recurrence = data["recurrence"] or {}
        row["recurrence_pattern"] = recurrence.get("pattern")
        row["recurrence_custom_pattern"] = recurrence.get("custom_pattern")
        row["recurrence_end_date"] = recurrence.get("end_date")

    if "facilities" in data:
        facilities = event.facilities
        row["facilities"] = facilities.model_dump(by_alias=True, exclude_none=True) if facilities else None

    if "tickets" in data:
        tickets = event.tickets
        row["tickets"] = tickets.model_dump(by_alias=True, exclude_none=True) if tickets else None

    return row


def row_to_event(row: Any) -> EventResponse:
    """Build the nested application shape from an ``Event`` row."""
    coordinates = None
    if row.latitude is not None and row.longitude is not None:
        coordinates = Coordinates(latitude=row.latitude, longitude=row.longitude)

    organizer = None
    if row.organizer_name:
        organizer = EventOrganizer(
            name=row.organizer_name,
            image=row.organizer_image,
            contact_email=row.organizer_contact_email,
            contact_phone=row.organizer_contact_phone,
            website=row.organizer_website,
        )

    recurrence = None
    if row.recurrence_pattern:
        recurrence = EventRecurrence(
            pattern=row.recurrence_pattern,
            custom_pattern=row.recurrence_custom_pattern,
            end_date=row.recurrence_end_date,
        )

    return EventResponse(
        id=row.id,
        title=row.title,
        category=row.category,
        image=row.image or "",
        time=row.time,
        day=row.day,
        location=row.location or "",
        coordinates=coordinates,
        rating=row.rating or 0,
        reviews=row.reviews or 0,
        price=row.price or "",
        description=row.description or "",
        organizer=organizer,
        duration=row.duration,
        recurrence=recurrence,
        facilities=EventFacilities.model_validate(row.facilities) if row.facilities else None,
        tickets=EventTickets.model_validate(row.tickets) if row.tickets else None,
        tags=row.tags or [],
        capacity=row.capacity,
        attendee_count=row.attendee_count or 0,
        is_sponsored=bool(row.is_sponsored),
        sponsor_end_date=row.sponsor_end_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
