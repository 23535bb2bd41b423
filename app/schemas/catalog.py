"""Activity and service schemas.

An activity or service is always handled as one ``CatalogItem``: the shared
base-item fields together with the category detail stored alongside it.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from app.schemas.base import BaseSchema


class ServiceCategory(str, Enum):
    ACCOMMODATION = "accommodation"
    MOBILITY = "mobility"
    HEALTH = "health"
    WELLNESS = "wellness"
    REAL_ESTATE = "real_estate"


class ActivityCategory(str, Enum):
    FOOD_DRINK = "food_drink"
    LEISURE = "leisure"
    CULTURE = "culture"
    SHOPPING = "shopping"


class Subcategory(str, Enum):
    # Accommodation
    HOTEL = "hotel"
    BUNGALOW = "bungalow"
    VILLA = "villa"
    GUESTHOUSE = "guesthouse"
    HOSTEL = "hostel"
    # Mobility
    SCOOTER_RENTAL = "scooter_rental"
    CAR_RENTAL = "car_rental"
    TAXI = "taxi"
    BIKE_RENTAL = "bike_rental"
    PRIVATE_DRIVER = "private_driver"
    FERRY = "ferry"
    BOAT_TOUR = "boat_tour"
    SHUTTLE = "shuttle"
    # Health
    HOSPITAL = "hospital"
    CLINIC = "clinic"
    DOCTOR = "doctor"
    PHARMACY = "pharmacy"
    EMERGENCY = "emergency"
    # Wellness
    SPA = "spa"
    MASSAGE = "massage"
    YOGA_STUDIO = "yoga_studio"
    BEAUTY_SALON = "beauty_salon"
    # Real estate
    REAL_ESTATE_AGENCY = "real_estate_agency"
    PROPERTY_MANAGEMENT = "property_management"
    LONG_TERM_RENTAL = "long_term_rental"
    # Food and drink
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    BAR = "bar"
    BEACH_BAR = "beach_bar"
    FOOD_TRUCK = "food_truck"
    STREET_FOOD = "street_food"
    # Leisure
    DIVING = "diving"
    WATER_SPORTS = "water_sports"
    EXCURSION = "excursion"
    HIKING = "hiking"
    YOGA = "yoga"
    # Culture
    GALLERY = "gallery"
    CONCERT_VENUE = "concert_venue"
    FESTIVAL = "festival"
    WORKSHOP = "workshop"
    CLASSES = "classes"
    # Shopping
    MARKET = "market"
    CLOTHING_STORE = "clothing_store"
    SOUVENIR_SHOP = "souvenir_shop"
    CRAFT_SHOP = "craft_shop"


ItemKind = Literal["activity", "service"]


class CatalogItemBase(BaseSchema):
    """Writable fields of an activity or service."""

    name: str = Field(..., min_length=1, max_length=255)
    category: str
    subcategory: Optional[Subcategory] = None
    short_description: str = Field(default="", alias="shortDescription")
    long_description: str = Field(default="", alias="longDescription")
    main_image: str = Field(default="", alias="mainImage")
    gallery_images: list[str] = Field(default_factory=list, alias="galleryImages")
    address: str = ""
    coordinates: Optional[dict[str, float]] = None
    area: str = ""
    contact_info: dict[str, Any] = Field(default_factory=dict, alias="contactInfo")
    hours: dict[str, Any] = Field(default_factory=dict)
    open_24h: bool = Field(default=False, alias="open24h")
    rating: float = Field(default=0, ge=0, le=5)
    tags: list[str] = Field(default_factory=list)
    price_range: str = Field(default="", alias="priceRange")
    currency: str = "THB"
    features: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    payment_methods: list[str] = Field(default_factory=list, alias="paymentMethods")
    accessibility: dict[str, Any] = Field(default_factory=dict)
    is_sponsored: bool = Field(default=False, alias="isSponsored")
    is_featured: bool = Field(default=False, alias="isFeatured")
    details: dict[str, Any] = Field(default_factory=dict, description="Category specific data")


class ActivityCreate(CatalogItemBase):
    category: ActivityCategory


class ServiceCreate(CatalogItemBase):
    category: ServiceCategory


class CatalogItemUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = None
    subcategory: Optional[Subcategory] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    main_image: Optional[str] = Field(default=None, alias="mainImage")
    gallery_images: Optional[list[str]] = Field(default=None, alias="galleryImages")
    address: Optional[str] = None
    coordinates: Optional[dict[str, float]] = None
    area: Optional[str] = None
    contact_info: Optional[dict[str, Any]] = Field(default=None, alias="contactInfo")
    hours: Optional[dict[str, Any]] = None
    open_24h: Optional[bool] = Field(default=None, alias="open24h")
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    tags: Optional[list[str]] = None
    price_range: Optional[str] = Field(default=None, alias="priceRange")
    currency: Optional[str] = None
    features: Optional[list[str]] = None
    languages: Optional[list[str]] = None
    payment_methods: Optional[list[str]] = Field(default=None, alias="paymentMethods")
    accessibility: Optional[dict[str, Any]] = None
    is_sponsored: Optional[bool] = Field(default=None, alias="isSponsored")
    is_featured: Optional[bool] = Field(default=None, alias="isFeatured")
    details: Optional[dict[str, Any]] = None


class CatalogItem(CatalogItemBase):
    """Joined activity or service as seen by every caller."""

    id: UUID
    type: ItemKind
    category: str
    subcategory: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class CatalogFilter(BaseSchema):
    category: Optional[str] = None
    subcategory: Optional[str] = None
    area: Optional[str] = None
    search: Optional[str] = None
    tags: Optional[list[str]] = None
    price_range: Optional[str] = None
    featured_only: bool = False


class CatalogToolItem(BaseSchema):
    """Trimmed item returned to the assistant by the search tool."""

    id: UUID
    name: str
    type: ItemKind
    category: str
    subcategory: Optional[str] = None
    main_image: str = Field(default="", serialization_alias="mainImage")
    short_description: str = Field(default="", serialization_alias="shortDescription")
    long_description: str = Field(default="", serialization_alias="longDescription")
    address: str = ""
    area: str = ""
    coordinates: Optional[dict[str, float]] = None
    rating: float = 0
    tags: list[str] = Field(default_factory=list)
    price_range: str = Field(default="", serialization_alias="priceRange")
    is_featured: bool = Field(default=False, serialization_alias="isFeatured")
    is_sponsored: bool = Field(default=False, serialization_alias="isSponsored")
    hours: dict[str, Any] = Field(default_factory=dict)
    activity_data: Optional[dict[str, Any]] = Field(default=None, serialization_alias="activityData")
    service_data: Optional[dict[str, Any]] = Field(default=None, serialization_alias="serviceData")

    @model_validator(mode="before")
    @classmethod
    def from_catalog_item(cls, value: Any) -> Any:
        if isinstance(value, CatalogItem):
            data = value.model_dump()
            key = "activity_data" if value.type == "activity" else "service_data"
            data[key] = data.pop("details")
            return data
        return value


def catalog_item_from_rows(base: Any, detail: Any) -> CatalogItem:
    """Join a ``BaseItem`` row with its ``ActivityDetail`` or ``ServiceDetail`` row."""
    item_type = base.type.value if isinstance(base.type, Enum) else base.type
    details = detail.activity_data if item_type == "activity" else detail.service_data
    return CatalogItem(
        id=base.id,
        type=item_type,
        category=detail.category,
        subcategory=detail.subcategory,
        name=base.name,
        short_description=base.short_description or "",
        long_description=base.long_description or "",
        main_image=base.main_image or "",
        gallery_images=base.gallery_images or [],
        address=base.address or "",
        coordinates=base.coordinates,
        area=base.area or "",
        contact_info=base.contact_info or {},
        hours=base.hours or {},
        open_24h=bool(base.open_24h),
        rating=base.rating or 0,
        tags=base.tags or [],
        price_range=base.price_range or "",
        currency=base.currency or "THB",
        features=base.features or [],
        languages=base.languages or [],
        payment_methods=base.payment_methods or [],
        accessibility=base.accessibility or {},
        is_sponsored=bool(base.is_sponsored),
        is_featured=bool(base.is_featured),
        details=details or {},
        created_at=base.created_at,
        updated_at=base.updated_at,
    )
