"""Admin dashboard API.

Every route requires an authenticated caller whose profile carries the admin
flag. Lists answer ``{data, meta}``; single-item routes use ``ResponseSchema``.
"""

import logging
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, require_admin
from app.exceptions.base import NotFoundError
from app.schemas.base import ListResponse, ResponseSchema, SponsorUpdate
from app.schemas.catalog import (
    ActivityCreate,
    CatalogItem,
    CatalogItemUpdate,
    ItemKind,
    ServiceCreate,
)
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.schemas.guide import GuideCreate, GuideResponse, GuideUpdate
from app.schemas.partner import PartnerCreate, PartnerResponse, PartnerUpdate
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.services import cached_queries
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_admin)],
)


class ListQuery:
    """Query string shared by the dashboard list views."""

    def __init__(
        self,
        search: Optional[str] = Query(None, description="Free-text filter"),
        category: Optional[str] = Query(None, description="Category filter"),
        page: int = Query(1, ge=1, description="Page number"),
        page_size: int = Query(10, ge=1, le=100, alias="pageSize", description="Page size"),
        sort: Optional[str] = Query(None, description="Column to sort by"),
        order: Literal["asc", "desc"] = Query("desc", description="Sort direction"),
    ):
        self.search = search
        self.category = category
        self.pagination = PaginationParams(page=page, page_size=page_size)
        self.sort = sort
        self.order = order

    def key(self) -> tuple:
        """Page, page size, sort and order, in the order the cached lists take them."""
        return self.pagination.page, self.pagination.page_size, self.sort, self.order


def _item(message: str, data) -> ResponseSchema:
    return ResponseSchema(status="success", message=message, data=data.model_dump(mode="json", by_alias=True))


def _deleted(message: str) -> ResponseSchema:
    return ResponseSchema(status="success", message=message)


# Overview


@router.get("/overview", response_model=ResponseSchema)
async def get_overview(db: AsyncSession = Depends(get_db)):
    overview = await cached_queries.get_dashboard_overview(db)
    return ResponseSchema(status="success", data=overview.model_dump())


# Events


@router.get("/events", response_model=ListResponse[EventResponse])
async def list_events(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await cached_queries.list_events(db, query.search, query.category, *query.key())


@router.get("/events/{event_id}", response_model=ResponseSchema)
async def get_event(event_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    event = await cached_queries.get_event_by_id(db, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return _item("Event retrieved successfully", event)


@router.post("/events", response_model=ResponseSchema, status_code=201)
async def create_event(event_data: EventCreate = Body(...), db: AsyncSession = Depends(get_db)):
    event = await cached_queries.create_event(db, event_data)
    return _item("Event created successfully", event)


@router.patch("/events/{event_id}", response_model=ResponseSchema)
async def update_event(
    event_id: UUID = Path(...),
    event_data: EventUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    event = await cached_queries.update_event(db, event_id, event_data)
    return _item("Event updated successfully", event)


@router.patch("/events/{event_id}/sponsor", response_model=ResponseSchema)
async def set_event_sponsorship(
    event_id: UUID = Path(...),
    sponsor: SponsorUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    event = await cached_queries.set_event_sponsorship(db, event_id, sponsor)
    return _item("Event sponsorship updated", event)


@router.delete("/events/{event_id}", response_model=ResponseSchema)
async def delete_event(event_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    await cached_queries.delete_event(db, event_id)
    return _deleted("Event deleted successfully")


# Guides


@router.get("/guides", response_model=ListResponse[GuideResponse])
async def list_guides(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await cached_queries.list_guides(db, query.search, query.category, *query.key())


@router.get("/guides/{guide_id}", response_model=ResponseSchema)
async def get_guide(guide_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    guide = await cached_queries.get_guide_by_id(db, guide_id)
    if guide is None:
        raise NotFoundError("Guide not found")
    return _item("Guide retrieved successfully", guide)


@router.post("/guides", response_model=ResponseSchema, status_code=201)
async def create_guide(guide_data: GuideCreate = Body(...), db: AsyncSession = Depends(get_db)):
    guide = await cached_queries.create_guide(db, guide_data)
    return _item("Guide created successfully", guide)


@router.patch("/guides/{guide_id}", response_model=ResponseSchema)
async def update_guide(
    guide_id: UUID = Path(...),
    guide_data: GuideUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    guide = await cached_queries.update_guide(db, guide_id, guide_data)
    return _item("Guide updated successfully", guide)


@router.delete("/guides/{guide_id}", response_model=ResponseSchema)
async def delete_guide(guide_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    await cached_queries.delete_guide(db, guide_id)
    return _deleted("Guide deleted successfully")


# Partners


@router.get("/partners", response_model=ListResponse[PartnerResponse])
async def list_partners(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await cached_queries.list_partners(db, query.search, query.category, *query.key())


@router.get("/partners/{partner_id}", response_model=ResponseSchema)
async def get_partner(partner_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    partner = await cached_queries.get_partner_by_id(db, partner_id)
    if partner is None:
        raise NotFoundError("Partner not found")
    return _item("Partner retrieved successfully", partner)


@router.post("/partners", response_model=ResponseSchema, status_code=201)
async def create_partner(partner_data: PartnerCreate = Body(...), db: AsyncSession = Depends(get_db)):
    partner = await cached_queries.create_partner(db, partner_data)
    return _item("Partner created successfully", partner)


@router.patch("/partners/{partner_id}", response_model=ResponseSchema)
async def update_partner(
    partner_id: UUID = Path(...),
    partner_data: PartnerUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    partner = await cached_queries.update_partner(db, partner_id, partner_data)
    return _item("Partner updated successfully", partner)


@router.patch("/partners/{partner_id}/sponsor", response_model=ResponseSchema)
async def set_partner_sponsorship(
    partner_id: UUID = Path(...),
    sponsor: SponsorUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    partner = await cached_queries.set_partner_sponsorship(db, partner_id, sponsor)
    return _item("Partner sponsorship updated", partner)


@router.delete("/partners/{partner_id}", response_model=ResponseSchema)
async def delete_partner(partner_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    await cached_queries.delete_partner(db, partner_id)
    return _deleted("Partner deleted successfully")


# Activities and services


async def _list_catalog(kind: ItemKind, query: ListQuery, db: AsyncSession) -> ListResponse[CatalogItem]:
    return await cached_queries.list_catalog_items(db, kind, query.search, query.category, *query.key())


async def _get_catalog(kind: ItemKind, item_id: UUID, db: AsyncSession) -> ResponseSchema:
    item = await cached_queries.get_catalog_item(db, kind, item_id)
    if item is None:
        raise NotFoundError(f"{kind.capitalize()} not found")
    return _item(f"{kind.capitalize()} retrieved successfully", item)


@router.get("/activities", response_model=ListResponse[CatalogItem])
async def list_activities(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await _list_catalog("activity", query, db)


@router.get("/activities/{item_id}", response_model=ResponseSchema)
async def get_activity(item_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    return await _get_catalog("activity", item_id, db)


@router.post("/activities", response_model=ResponseSchema, status_code=201)
async def create_activity(item_data: ActivityCreate = Body(...), db: AsyncSession = Depends(get_db)):
    item = await cached_queries.create_catalog_item(db, "activity", item_data)
    return _item("Activity created successfully", item)


@router.patch("/activities/{item_id}", response_model=ResponseSchema)
async def update_activity(
    item_id: UUID = Path(...),
    item_data: CatalogItemUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    item = await cached_queries.update_catalog_item(db, "activity", item_id, item_data)
    return _item("Activity updated successfully", item)


@router.delete("/activities/{item_id}", response_model=ResponseSchema)
async def delete_activity(item_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    await cached_queries.delete_catalog_item(db, "activity", item_id)
    return _deleted("Activity deleted successfully")


@router.get("/services", response_model=ListResponse[CatalogItem])
async def list_services(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await _list_catalog("service", query, db)


@router.get("/services/{item_id}", response_model=ResponseSchema)
async def get_service(item_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    return await _get_catalog("service", item_id, db)


@router.post("/services", response_model=ResponseSchema, status_code=201)
async def create_service(item_data: ServiceCreate = Body(...), db: AsyncSession = Depends(get_db)):
    item = await cached_queries.create_catalog_item(db, "service", item_data)
    return _item("Service created successfully", item)


@router.patch("/services/{item_id}", response_model=ResponseSchema)
async def update_service(
    item_id: UUID = Path(...),
    item_data: CatalogItemUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    item = await cached_queries.update_catalog_item(db, "service", item_id, item_data)
    return _item("Service updated successfully", item)


@router.delete("/services/{item_id}", response_model=ResponseSchema)
async def delete_service(item_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    await cached_queries.delete_catalog_item(db, "service", item_id)
    return _deleted("Service deleted successfully")


# Users


@router.get("/users", response_model=ListResponse[ProfileResponse])
async def list_users(query: ListQuery = Depends(), db: AsyncSession = Depends(get_db)):
    return await cached_queries.list_profiles(db, query.search, *query.key())


@router.get("/users/{user_id}", response_model=ResponseSchema)
async def get_user(user_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    profile = await cached_queries.get_user_profile(db, user_id)
    if profile is None:
        raise NotFoundError("User not found")
    return _item("User retrieved successfully", profile)


@router.patch("/users/{user_id}", response_model=ResponseSchema)
async def update_user(
    user_id: UUID = Path(...),
    profile_data: ProfileUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    profile = await cached_queries.update_user_profile(db, user_id, profile_data)
    return _item("User updated successfully", profile)


@router.post("/users/{user_id}/toggle-admin", response_model=ResponseSchema)
async def toggle_admin(user_id: UUID = Path(...), db: AsyncSession = Depends(get_db)):
    profile = await cached_queries.toggle_user_admin_status(db, user_id)
    logger.info(f"Admin flag of user {user_id} is now {profile.is_admin}")
    return _item("Admin status updated", profile)
