"""Guide schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema


class GuideCategory(str, Enum):
    """Editorial topics a guide can be filed under."""

    APPLICATIONS_ESSENTIELLES = "applications-essentielles"
    VISA_IMMIGRATION = "visa-immigration"
    SANTE_MEDICAL = "sante-medical"
    MONNAIE_CHANGE = "monnaie-change"
    COMMUNICATION = "communication"
    PLAGES_SPOTS = "plages-spots"
    ACTIVITES_NAUTIQUES = "activites-nautiques"
    RANDONNEE_TREK = "randonnee-trek"
    BIEN_ETRE_RETRAITES = "bien-etre-retraites"
    SITES_CULTURELS = "sites-culturels"
    TRANSPORTS_LOCAUX = "transports-locaux"
    FERRIES_BATEAUX = "ferries-bateaux"
    AEROPORT_PORTS = "aeroport-ports"
    ITINERAIRES_PARKINGS = "itineraires-parkings"
    LOGEMENT_IMMOBILIER = "logement-immobilier"
    COWORKING_ESPACES = "coworking-espaces"
    FORMALITES_ENTREPRISE = "formalites-entreprise"
    EDUCATION_LANGUES = "education-langues"
    ASSOCIATIONS_RESEAUX = "associations-reseaux"
    CONTACTS_URGENCE = "contacts-urgence"
    CONSEILS_SECURITE = "conseils-securite"
    ASSISTANCE_ROUTIERE = "assistance-routiere"
    COUTUMES_ETIQUETTE = "coutumes-etiquette"
    FESTIVALS_FETES = "festivals-fetes"
    BENEVOLAT_ASSOCIATIONS = "benevolat-associations"
    METEO_SAISONS = "meteo-saisons"
    ACTUALITES_LOCALES = "actualites-locales"
    BONS_PLANS = "bons-plans"
    CONSEILS_SAISONNIERS = "conseils-saisonniers"


class GuideImages(BaseSchema):
    main: str = ""
    gallery: list[str] = Field(default_factory=list)


class GuideDescription(BaseSchema):
    short: str = ""
    long: str = ""


class GuideLocation(BaseSchema):
    address: str = ""
    area: Optional[str] = None


class GuideSection(BaseSchema):
    id: str
    title: str
    content: str
    order: int = 0


class RelatedContact(BaseSchema):
    id: Optional[str] = None
    name: str
    type: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None


class PracticalInfo(BaseSchema):
    requirements: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    best_time_to_visit: Optional[str] = Field(default=None, alias="bestTimeToVisit")


class GuideBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    category: GuideCategory
    slug: Optional[str] = None
    images: GuideImages = Field(default_factory=GuideImages)
    description: GuideDescription = Field(default_factory=GuideDescription)
    location: GuideLocation = Field(default_factory=GuideLocation)
    sections: list[GuideSection] = Field(default_factory=list)
    related_contacts: list[RelatedContact] = Field(default_factory=list, alias="relatedContacts")
    practical_info: PracticalInfo = Field(default_factory=PracticalInfo, alias="practicalInfo")
    tags: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    is_featured: bool = Field(default=False, alias="isFeatured")


class GuideCreate(GuideBase):
    pass


class GuideUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[GuideCategory] = None
    slug: Optional[str] = None
    images: Optional[GuideImages] = None
    description: Optional[GuideDescription] = None
    location: Optional[GuideLocation] = None
    sections: Optional[list[GuideSection]] = None
    related_contacts: Optional[list[RelatedContact]] = Field(default=None, alias="relatedContacts")
    practical_info: Optional[PracticalInfo] = Field(default=None, alias="practicalInfo")
    tags: Optional[list[str]] = None
    features: Optional[list[str]] = None
    is_featured: Optional[bool] = Field(default=None, alias="isFeatured")


class GuideResponse(GuideBase):
    id: UUID
    category: str
    last_updated_at: datetime = Field(alias="lastUpdatedAt")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class GuideFilter(BaseSchema):
    title: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[list[str]] = None
