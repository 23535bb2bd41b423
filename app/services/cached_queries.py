"""
Cached reads and invalidating writes.

Reads are memoized in the process-wide ``query_cache`` under short TTLs and
return pydantic schemas, never ORM rows. Every write goes through the matching
service and then drops the cache tags it affects.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.domains.catalog.service import CatalogService
from app.domains.chat.messages import parse_stored_content
from app.domains.chat.service import ChatService
from app.domains.dashboard.service import DashboardService
from app.domains.event.service import EventService
from app.domains.guide.service import GuideService
from app.domains.partner.service import PartnerService
from app.domains.user.service import UserService
from app.schemas.base import ListResponse, SponsorUpdate
from app.schemas.catalog import CatalogFilter, CatalogItem, CatalogItemBase, CatalogItemUpdate, ItemKind
from app.schemas.chat import ChatResponse, MessageResponse
from app.schemas.dashboard import DashboardOverview
from app.schemas.event import EventCreate, EventFilter, EventResponse, EventUpdate, row_to_event
from app.schemas.guide import GuideCreate, GuideFilter, GuideResponse, GuideUpdate
from app.schemas.partner import PartnerCreate, PartnerFilter, PartnerResponse, PartnerUpdate, row_to_partner
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.shared.cache import cached, query_cache
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)


# Chats and messages


@cached("chat", ttl=lambda: settings.cache_ttl_chat, tags=lambda chat_id: [f"chat_{chat_id}"])
async def get_chat_by_id(db: AsyncSession, chat_id: UUID) -> Optional[ChatResponse]:
    chat = await ChatService(db).get_chat_by_id(chat_id)
    return ChatResponse.model_validate(chat) if chat else None


@cached("chats", ttl=lambda: settings.cache_ttl_chat, tags=lambda user_id: [f"user_{user_id}_chats"])
async def get_chats_by_user_id(db: AsyncSession, user_id: UUID) -> List[ChatResponse]:
    chats = await ChatService(db).get_chats_by_user_id(user_id)
    return [ChatResponse.model_validate(chat) for chat in chats]


@cached("messages", ttl=lambda: settings.cache_ttl_chat, tags=lambda chat_id: [f"chat_{chat_id}_messages"])
async def get_messages_by_chat_id(db: AsyncSession, chat_id: UUID) -> List[MessageResponse]:
    messages = await ChatService(db).get_messages_by_chat_id(chat_id)
    return [
        MessageResponse(
            id=message.id,
            chat_id=message.chat_id,
            role=message.role,
            content=parse_stored_content(message.role, message.content),
            created_at=message.created_at,
        )
        for message in messages
    ]


async def save_chat(db: AsyncSession, chat_id: UUID, user_id: UUID, title: str) -> ChatResponse:
    try:
        chat = await ChatService(db).save_chat(chat_id, user_id, title)
    finally:
        # cached misses for this id are stale whether or not the insert won
        query_cache.invalidate(f"chat_{chat_id}", f"user_{user_id}_chats")
    return ChatResponse.model_validate(chat)


async def save_messages(db: AsyncSession, chat_id: UUID, messages: list[dict]) -> None:
    await ChatService(db).save_messages(chat_id, messages)
    query_cache.invalidate(f"chat_{chat_id}_messages")


async def delete_chat_by_id(db: AsyncSession, chat_id: UUID, user_id: UUID) -> bool:
    deleted = await ChatService(db).delete_chat_by_id(chat_id, user_id)
    query_cache.invalidate(f"chat_{chat_id}", f"chat_{chat_id}_messages", f"user_{user_id}_chats")
    return deleted


# Events


@cached("event", ttl=lambda: settings.cache_ttl_events, tags=lambda event_id: ["events", f"event_{event_id}"])
async def get_event_by_id(db: AsyncSession, event_id: UUID) -> Optional[EventResponse]:
    event = await EventService(db).get_event_by_id(event_id)
    return row_to_event(event) if event else None


async def create_event(db: AsyncSession, event_data: EventCreate) -> EventResponse:
    event = await EventService(db).create_event(event_data)
    query_cache.invalidate("events")
    return row_to_event(event)


async def update_event(db: AsyncSession, event_id: UUID, event_data: EventUpdate) -> EventResponse:
    event = await EventService(db).update_event(event_id, event_data)
    query_cache.invalidate("events", f"event_{event_id}")
    return row_to_event(event)


async def set_event_sponsorship(db: AsyncSession, event_id: UUID, sponsor: SponsorUpdate) -> EventResponse:
    event = await EventService(db).set_sponsorship(event_id, sponsor)
    query_cache.invalidate("events", f"event_{event_id}")
    return row_to_event(event)


async def delete_event(db: AsyncSession, event_id: UUID) -> bool:
    deleted = await EventService(db).delete_event(event_id)
    query_cache.invalidate("events", f"event_{event_id}")
    return deleted


# Partners


@cached(
    "partner", ttl=lambda: settings.cache_ttl_partners, tags=lambda partner_id: ["partners", f"partner_{partner_id}"]
)
async def get_partner_by_id(db: AsyncSession, partner_id: UUID) -> Optional[PartnerResponse]:
    partner = await PartnerService(db).get_partner_by_id(partner_id)
    return row_to_partner(partner) if partner else None


async def create_partner(db: AsyncSession, partner_data: PartnerCreate) -> PartnerResponse:
    partner = await PartnerService(db).create_partner(partner_data)
    query_cache.invalidate("partners")
    return row_to_partner(partner)


async def update_partner(db: AsyncSession, partner_id: UUID, partner_data: PartnerUpdate) -> PartnerResponse:
    partner = await PartnerService(db).update_partner(partner_id, partner_data)
    query_cache.invalidate("partners", f"partner_{partner_id}")
    return row_to_partner(partner)


async def set_partner_sponsorship(db: AsyncSession, partner_id: UUID, sponsor: SponsorUpdate) -> PartnerResponse:
    partner = await PartnerService(db).set_sponsorship(partner_id, sponsor)
    query_cache.invalidate("partners", f"partner_{partner_id}")
    return row_to_partner(partner)


async def delete_partner(db: AsyncSession, partner_id: UUID) -> bool:
    deleted = await PartnerService(db).delete_partner(partner_id)
    query_cache.invalidate("partners", f"partner_{partner_id}")
    return deleted


# Guides


@cached("guide", ttl=lambda: settings.cache_ttl_guides, tags=lambda guide_id: ["guides", f"guide_{guide_id}"])
async def get_guide_by_id(db: AsyncSession, guide_id: UUID) -> Optional[GuideResponse]:
    guide = await GuideService(db).get_guide_by_id(guide_id)
    return GuideResponse.model_validate(guide) if guide else None


async def create_guide(db: AsyncSession, guide_data: GuideCreate) -> GuideResponse:
    guide = await GuideService(db).create_guide(guide_data)
    query_cache.invalidate("guides")
    return GuideResponse.model_validate(guide)


async def update_guide(db: AsyncSession, guide_id: UUID, guide_data: GuideUpdate) -> GuideResponse:
    guide = await GuideService(db).update_guide(guide_id, guide_data)
    query_cache.invalidate("guides", f"guide_{guide_id}")
    return GuideResponse.model_validate(guide)


async def delete_guide(db: AsyncSession, guide_id: UUID) -> bool:
    deleted = await GuideService(db).delete_guide(guide_id)
    query_cache.invalidate("guides", f"guide_{guide_id}")
    return deleted


# Activities and services


@cached(
    "catalog_item",
    ttl=lambda: settings.cache_ttl_catalog,
    tags=lambda kind, item_id: [f"{kind}s", f"{kind}_{item_id}"],
)
async def get_catalog_item(db: AsyncSession, kind: ItemKind, item_id: UUID) -> Optional[CatalogItem]:
    return await CatalogService(db).get_item(kind, item_id)


async def create_catalog_item(db: AsyncSession, kind: ItemKind, item_data: CatalogItemBase) -> CatalogItem:
    item = await CatalogService(db).create_item(kind, item_data)
    query_cache.invalidate(f"{kind}s")
    return item


async def update_catalog_item(
    db: AsyncSession, kind: ItemKind, item_id: UUID, item_data: CatalogItemUpdate
) -> CatalogItem:
    item = await CatalogService(db).update_item(kind, item_id, item_data)
    query_cache.invalidate(f"{kind}s", f"{kind}_{item_id}")
    return item


async def delete_catalog_item(db: AsyncSession, kind: ItemKind, item_id: UUID) -> bool:
    deleted = await CatalogService(db).delete_item(kind, item_id)
    query_cache.invalidate(f"{kind}s", f"{kind}_{item_id}")
    return deleted


# Profiles


@cached("user_profile", ttl=lambda: settings.cache_ttl_profile, tags=lambda user_id: [f"user_profile_{user_id}"])
async def get_user_profile(db: AsyncSession, user_id: UUID) -> Optional[ProfileResponse]:
    profile = await UserService(db).get_profile(user_id)
    return ProfileResponse.model_validate(profile) if profile else None


@cached("user_admin", ttl=lambda: settings.cache_ttl_profile, tags=lambda user_id: [f"user_admin_{user_id}"])
async def is_user_admin(db: AsyncSession, user_id: UUID) -> bool:
    return await UserService(db).is_admin(user_id)


@cached(
    "dashboard_overview",
    ttl=lambda: settings.cache_ttl_counts,
    tags=lambda: ["profiles", "events", "partners", "guides", "activitys", "services"],
)
async def get_dashboard_overview(db: AsyncSession) -> DashboardOverview:
    return await DashboardService(db).get_overview()


async def get_or_create_profile(db: AsyncSession, user_id: UUID, email: Optional[str] = None) -> ProfileResponse:
    profile = await get_user_profile(db, user_id)
    if profile is not None:
        return profile
    created = await UserService(db).get_or_create_profile(user_id, email)
    query_cache.invalidate("profiles", f"user_profile_{user_id}", f"user_admin_{user_id}")
    return ProfileResponse.model_validate(created)


async def update_user_profile(db: AsyncSession, user_id: UUID, profile_data: ProfileUpdate) -> ProfileResponse:
    profile = await UserService(db).update_profile(user_id, profile_data)
    query_cache.invalidate("profiles", f"user_profile_{user_id}")
    return ProfileResponse.model_validate(profile)


async def toggle_user_admin_status(db: AsyncSession, user_id: UUID) -> ProfileResponse:
    profile = await UserService(db).toggle_admin(user_id)
    query_cache.invalidate("profiles", f"user_profile_{user_id}", f"user_admin_{user_id}")
    return ProfileResponse.model_validate(profile)


# Dashboard lists, keyed by the raw query values


@cached("event_list", ttl=lambda: settings.cache_ttl_events, tags=lambda *args: ["events"])
async def list_events(
    db: AsyncSession,
    search: Optional[str],
    category: Optional[str],
    page: int,
    page_size: int,
    sort: Optional[str],
    order: str,
) -> ListResponse[EventResponse]:
    result = await EventService(db).list_events(
        EventFilter(search=search, category=category),
        PaginationParams(page=page, page_size=page_size),
        sort,
        order,
    )
    return ListResponse[EventResponse](data=[row_to_event(row) for row in result["items"]], meta=result["meta"])


@cached("guide_list", ttl=lambda: settings.cache_ttl_guides, tags=lambda *args: ["guides"])
async def list_guides(
    db: AsyncSession,
    search: Optional[str],
    category: Optional[str],
    page: int,
    page_size: int,
    sort: Optional[str],
    order: str,
) -> ListResponse[GuideResponse]:
    result = await GuideService(db).list_guides(
        GuideFilter(title=search, category=category),
        PaginationParams(page=page, page_size=page_size),
        sort,
        order,
    )
    return ListResponse[GuideResponse](
        data=[GuideResponse.model_validate(row) for row in result["items"]], meta=result["meta"]
    )


@cached("partner_list", ttl=lambda: settings.cache_ttl_partners, tags=lambda *args: ["partners"])
async def list_partners(
    db: AsyncSession,
    search: Optional[str],
    category: Optional[str],
    page: int,
    page_size: int,
    sort: Optional[str],
    order: str,
) -> ListResponse[PartnerResponse]:
    result = await PartnerService(db).list_partners(
        PartnerFilter(name=search, category=category),
        PaginationParams(page=page, page_size=page_size),
        sort,
        order,
    )
    return ListResponse[PartnerResponse](data=[row_to_partner(row) for row in result["items"]], meta=result["meta"])


@cached("catalog_list", ttl=lambda: settings.cache_ttl_catalog, tags=lambda kind, *args: [f"{kind}s"])
async def list_catalog_items(
    db: AsyncSession,
    kind: ItemKind,
    search: Optional[str],
    category: Optional[str],
    page: int,
    page_size: int,
    sort: Optional[str],
    order: str,
) -> ListResponse[CatalogItem]:
    result = await CatalogService(db).list_items(
        kind,
        CatalogFilter(search=search, category=category),
        PaginationParams(page=page, page_size=page_size),
        sort,
        order,
    )
    return ListResponse[CatalogItem](data=result["items"], meta=result["meta"])


@cached("profile_list", ttl=lambda: settings.cache_ttl_profile, tags=lambda *args: ["profiles"])
async def list_profiles(
    db: AsyncSession,
    search: Optional[str],
    page: int,
    page_size: int,
    sort: Optional[str],
    order: str,
) -> ListResponse[ProfileResponse]:
    result = await UserService(db).list_profiles(search, PaginationParams(page=page, page_size=page_size), sort, order)
    return ListResponse[ProfileResponse](
        data=[ProfileResponse.model_validate(row) for row in result["items"]], meta=result["meta"]
    )
