"""Partner schemas.

Category-specific attributes are a tagged union keyed by ``category``; each
member lists the fields known for that kind of business.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema

PartnerCategory = Literal[
    # Transport and rentals
    "location-scooter", "location-voiture", "location-bateau", "location-velo",
    # Accommodation
    "hebergement-appartement", "hebergement-bungalow", "hebergement-villa", "hebergement-guesthouse",
    # Food and drink
    "restaurant", "cafe", "bar", "street-food",
    # Wellness and health
    "salon-massage", "spa", "yoga-meditation", "medical",
    # Professional services
    "architecte", "agence-immobiliere", "location-materiel",
    # Shopping
    "magasin-vetements", "supermarche", "boutique-artisanale",
    # Leisure
    "excursion", "plongee", "cours",
    # Nightlife
    "club", "bar-nuit", "full-moon-party",
    # Spiritual
    "retraite-spirituelle", "medium", "meditation",
    # Other
    "evenement", "service-educatif", "autre",
]

SkillLevel = Literal["beginner", "intermediate", "advanced", "all_levels"]


class Seasonality(BaseSchema):
    high_season: Optional[str] = Field(default=None, alias="highSeason")
    low_season: Optional[str] = Field(default=None, alias="lowSeason")
    closed_periods: list[str] = Field(default_factory=list, alias="closedPeriods")


class AccommodationAttributes(BaseSchema):
    category: Literal["accommodation"] = "accommodation"
    accommodation_type: Literal["hotel", "bungalow", "villa", "guesthouse", "hostel"] = Field(alias="accommodationType")
    rooms: list[dict[str, Any]] = Field(default_factory=list)
    facilities: list[str] = Field(default_factory=list)
    policies: dict[str, Any] = Field(default_factory=dict)
    included_services: list[str] = Field(default_factory=list, alias="includedServices")
    nearby_attractions: list[str] = Field(default_factory=list, alias="nearbyAttractions")
    distance_to_beach: Optional[int] = Field(default=None, alias="distanceToBeach")
    transfer_service: Optional[bool] = Field(default=None, alias="transferService")
    property_details: Optional[dict[str, Any]] = Field(default=None, alias="propertyDetails")


class FoodDrinkAttributes(BaseSchema):
    category: Literal["food_drink"] = "food_drink"
    establishment_type: Literal[
        "restaurant", "cafe", "bar", "beach_bar", "food_truck", "street_food"
    ] = Field(alias="establishmentType")
    cuisine: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    menu_highlights: list[str] = Field(default_factory=list, alias="menuHighlights")
    dining_options: dict[str, bool] = Field(default_factory=dict, alias="diningOptions")
    atmosphere: list[str] = Field(default_factory=list)
    seating: dict[str, Any] = Field(default_factory=dict)
    dietary_options: list[str] = Field(default_factory=list, alias="dietaryOptions")
    alcohol_served: Optional[bool] = Field(default=None, alias="alcoholServed")
    special_events: list[dict[str, Any]] = Field(default_factory=list, alias="specialEvents")
    happy_hour: Optional[dict[str, Any]] = Field(default=None, alias="happyHour")


class LeisureAttributes(BaseSchema):
    category: Literal["leisure"] = "leisure"
    activity_type: Literal["diving", "yoga", "excursion", "water_sports", "hiking", "other"] = Field(alias="activityType")
    sessions: list[dict[str, Any]] = Field(default_factory=list)
    skill_level: Optional[SkillLevel] = Field(default=None, alias="skillLevel")
    includes_equipment: Optional[bool] = Field(default=None, alias="includesEquipment")
    equipment: list[str] = Field(default_factory=list)
    minimum_age: Optional[int] = Field(default=None, alias="minimumAge")
    maximum_group_size: Optional[int] = Field(default=None, alias="maximumGroupSize")
    includes: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    weather_dependent: Optional[bool] = Field(default=None, alias="weatherDependent")
    seasonality: Optional[Seasonality] = None
    instructors: list[dict[str, Any]] = Field(default_factory=list)
    booking_policy: Optional[dict[str, Any]] = Field(default=None, alias="bookingPolicy")


class ShoppingAttributes(BaseSchema):
    category: Literal["shopping"] = "shopping"
    shop_type: Literal["market", "clothing_store", "souvenir_shop", "craft_shop", "other"] = Field(alias="shopType")
    product_types: list[str] = Field(default_factory=list, alias="productTypes")
    specialties: list[str] = Field(default_factory=list)
    locally_made: Optional[bool] = Field(default=None, alias="locallyMade")
    sustainable_practices: list[str] = Field(default_factory=list, alias="sustainablePractices")
    price_level: Optional[Literal["budget", "mid_range", "premium", "luxury"]] = Field(default=None, alias="priceLevel")
    brands: list[str] = Field(default_factory=list)
    returns: Optional[dict[str, Any]] = None
    shipping: Optional[dict[str, Any]] = None
    customization: Optional[dict[str, Any]] = None


class CultureAttributes(BaseSchema):
    category: Literal["culture"] = "culture"
    venue_type: Literal[
        "gallery", "museum", "theater", "cinema", "cultural_center", "temple", "historical_site"
    ] = Field(alias="venueType")
    event_types: list[str] = Field(default_factory=list, alias="eventTypes")
    upcoming_events: list[dict[str, Any]] = Field(default_factory=list, alias="upcomingEvents")
    exhibits: list[dict[str, Any]] = Field(default_factory=list)
    workshops: list[dict[str, Any]] = Field(default_factory=list)
    special_features: list[str] = Field(default_factory=list, alias="specialFeatures")
    photography: Optional[dict[str, Any]] = None
    seasonal_schedule: Optional[Seasonality] = Field(default=None, alias="seasonalSchedule")
    entry_fee: Optional[str] = Field(default=None, alias="entryFee")


class TransportAttributes(BaseSchema):
    category: Literal["transport"] = "transport"
    transport_type: Literal["ferry", "boat_tour", "shuttle", "other"] = Field(alias="transportType")
    routes: list[dict[str, Any]] = Field(default_factory=list)
    vehicle_fleet: list[dict[str, Any]] = Field(default_factory=list, alias="vehicleFleet")
    ticket_options: list[dict[str, Any]] = Field(default_factory=list, alias="ticketOptions")
    online_booking: Optional[dict[str, Any]] = Field(default=None, alias="onlineBooking")
    baggage_policy: Optional[dict[str, Any]] = Field(default=None, alias="baggagePolicy")
    amenities: list[str] = Field(default_factory=list)
    special_services: Optional[dict[str, Any]] = Field(default=None, alias="specialServices")


class MobilityAttributes(BaseSchema):
    category: Literal["mobility"] = "mobility"
    service_type: Literal["rental", "taxi", "driver", "tour", "delivery"] = Field(alias="serviceType")
    vehicle_types: list[dict[str, Any]] = Field(default_factory=list, alias="vehicleTypes")
    rental_requirements: list[str] = Field(default_factory=list, alias="rentalRequirements")
    services: dict[str, bool] = Field(default_factory=dict)
    booking_options: dict[str, Any] = Field(default_factory=dict, alias="bookingOptions")
    deposit_required: Optional[bool] = Field(default=None, alias="depositRequired")
    deposit_amount: Optional[float] = Field(default=None, alias="depositAmount")
    license_requirements: list[str] = Field(default_factory=list, alias="licenseRequirements")


class HealthAttributes(BaseSchema):
    category: Literal["health"] = "health"
    facility_type: Literal["hospital", "clinic", "doctor", "pharmacy", "emergency_service"] = Field(alias="facilityType")
    services: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    emergency_service: Optional[bool] = Field(default=None, alias="emergencyService")
    emergency_number: Optional[str] = Field(default=None, alias="emergencyNumber")
    appointment_required: Optional[bool] = Field(default=None, alias="appointmentRequired")
    walk_in_accepted: Optional[bool] = Field(default=None, alias="walkInAccepted")
    insurance_accepted: list[str] = Field(default_factory=list, alias="insuranceAccepted")
    open_hours: str = Field(default="", alias="openHours")
    doctors: list[dict[str, Any]] = Field(default_factory=list)


class WellnessAttributes(BaseSchema):
    category: Literal["wellness"] = "wellness"
    service_type: Literal[
        "spa", "massage", "yoga_studio", "beauty_salon", "fitness", "retreat"
    ] = Field(alias="serviceType")
    treatments: list[dict[str, Any]] = Field(default_factory=list)
    packages: list[dict[str, Any]] = Field(default_factory=list)
    classes: list[dict[str, Any]] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    specialists: list[dict[str, Any]] = Field(default_factory=list)
    facilities: list[str] = Field(default_factory=list)
    booking: Optional[dict[str, Any]] = None
    gift_certificates: Optional[bool] = Field(default=None, alias="giftCertificates")


class RealEstateAttributes(BaseSchema):
    category: Literal["real_estate"] = "real_estate"
    service_type: Literal[
        "real_estate_agency", "property_management", "long_term_rental", "legal_services"
    ] = Field(alias="serviceType")
    services_offered: list[str] = Field(default_factory=list, alias="servicesOffered")
    properties: list[dict[str, Any]] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    commission: Optional[str] = None
    licensing: Optional[dict[str, Any]] = None
    years_in_business: Optional[int] = Field(default=None, alias="yearsInBusiness")


PartnerAttributes = Annotated[
    Union[
        AccommodationAttributes,
        FoodDrinkAttributes,
        LeisureAttributes,
        ShoppingAttributes,
        CultureAttributes,
        TransportAttributes,
        MobilityAttributes,
        HealthAttributes,
        WellnessAttributes,
        RealEstateAttributes,
    ],
    Field(discriminator="category"),
]


class PartnerLocation(BaseSchema):
    address: str = ""
    area: Optional[str] = None
    coordinates: Optional[dict[str, float]] = None


class PartnerContact(BaseSchema):
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    social: dict[str, str] = Field(default_factory=dict)


class PartnerBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    category: PartnerCategory
    subcategory: Optional[str] = None
    image: str = ""
    gallery: list[str] = Field(default_factory=list)
    short_description: str = Field(default="", alias="shortDescription")
    long_description: str = Field(default="", alias="longDescription")
    location: PartnerLocation = Field(default_factory=PartnerLocation)
    contact: PartnerContact = Field(default_factory=PartnerContact)
    open_hours: str = Field(default="", alias="openHours")
    rating: float = 0
    reviews: int = 0
    price_range: str = Field(default="", alias="priceRange")
    tags: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    payment_options: dict[str, Any] = Field(default_factory=dict, alias="paymentOptions")
    accessibility: dict[str, Any] = Field(default_factory=dict)
    attributes: Optional[PartnerAttributes] = None
    is_featured: bool = Field(default=False, alias="isFeatured")
    is_sponsored: bool = Field(default=False, alias="isSponsored")
    sponsor_end_date: Optional[datetime] = Field(default=None, alias="sponsorEndDate")


class PartnerCreate(PartnerBase):
    pass


class PartnerUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[PartnerCategory] = None
    subcategory: Optional[str] = None
    image: Optional[str] = None
    gallery: Optional[list[str]] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    location: Optional[PartnerLocation] = None
    contact: Optional[PartnerContact] = None
    open_hours: Optional[str] = Field(default=None, alias="openHours")
    rating: Optional[float] = None
    price_range: Optional[str] = Field(default=None, alias="priceRange")
    tags: Optional[list[str]] = None
    features: Optional[list[str]] = None
    languages: Optional[list[str]] = None
    payment_options: Optional[dict[str, Any]] = Field(default=None, alias="paymentOptions")
    accessibility: Optional[dict[str, Any]] = None
    attributes: Optional[PartnerAttributes] = None
    is_featured: Optional[bool] = Field(default=None, alias="isFeatured")
    is_sponsored: Optional[bool] = Field(default=None, alias="isSponsored")
    sponsor_end_date: Optional[datetime] = Field(default=None, alias="sponsorEndDate")


class PartnerResponse(PartnerBase):
    id: UUID
    category: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PartnerFilter(BaseSchema):
    name: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[list[str]] = None


def partner_to_row(partner: PartnerBase | PartnerUpdate, partial: bool = False) -> dict[str, Any]:
    """Column values for a partner; ``main_category`` follows the attributes tag."""
    row = partner.model_dump(exclude_unset=partial, exclude={"attributes"})
    if "attributes" in partner.model_fields_set or not partial:
        attributes = partner.attributes
        row["attributes"] = attributes.model_dump(by_alias=True, exclude_none=True) if attributes else None
        row["main_category"] = attributes.category if attributes else None
    return row


def row_to_partner(row: Any) -> PartnerResponse:
    """Build a partner schema from a ``Partner`` row."""
    return PartnerResponse(
        id=row.id,
        name=row.name,
        category=row.category,
        subcategory=row.subcategory,
        image=row.image or "",
        gallery=row.gallery or [],
        short_description=row.short_description or "",
        long_description=row.long_description or "",
        location=row.location or {},
        contact=row.contact or {},
        open_hours=row.open_hours or "",
        rating=row.rating or 0,
        reviews=row.reviews or 0,
        price_range=row.price_range or "",
        tags=row.tags or [],
        features=row.features or [],
        languages=row.languages or [],
        payment_options=row.payment_options or {},
        accessibility=row.accessibility or {},
        attributes=row.attributes or None,
        is_featured=bool(row.is_featured),
        is_sponsored=bool(row.is_sponsored),
        sponsor_end_date=row.sponsor_end_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
