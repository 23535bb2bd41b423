"""Schemas package."""

from app.schemas.base import BaseSchema, ListMeta, ListResponse, ResponseSchema
from app.schemas.catalog import CatalogItem, CatalogItemUpdate
from app.schemas.chat import ChatRequest, ChatResponse, CoreMessage, MessageResponse
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.schemas.guide import GuideCreate, GuideResponse, GuideUpdate
from app.schemas.partner import PartnerCreate, PartnerResponse, PartnerUpdate
from app.schemas.profile import ProfileResponse, ProfileUpdate

__all__ = [
    "BaseSchema",
    "ResponseSchema",
    "ListMeta",
    "ListResponse",
    "CatalogItem",
    "CatalogItemUpdate",
    "ChatRequest",
    "ChatResponse",
    "CoreMessage",
    "MessageResponse",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "GuideCreate",
    "GuideResponse",
    "GuideUpdate",
    "PartnerCreate",
    "PartnerResponse",
    "PartnerUpdate",
    "ProfileResponse",
    "ProfileUpdate",
]
