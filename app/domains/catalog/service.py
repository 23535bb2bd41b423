"""Activity and service persistence.

Listings are stored as a ``base_items`` row plus an ``activities`` or
``services`` detail row with the same id. This service only ever hands out
joined ``CatalogItem`` aggregates; a row missing either half is skipped.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.exceptions.base import NotFoundError, ValidationError
from app.schemas.catalog import (
    ActivityCategory,
    CatalogFilter,
    CatalogItem,
    CatalogItemBase,
    CatalogItemUpdate,
    ItemKind,
    ServiceCategory,
    catalog_item_from_rows,
)
from app.shared.filters import apply_sort, ilike_any, json_tag_clause
from app.shared.pagination import PaginationParams, paginate
from models.catalog import ActivityDetail, BaseItem, ItemType, ServiceDetail

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("name", "area", "rating", "price_range", "created_at", "updated_at")

DETAIL_FIELDS = ("category", "subcategory", "details")

_CATEGORIES = {
    "activity": {c.value for c in ActivityCategory},
    "service": {c.value for c in ServiceCategory},
}


def _detail_model(kind: ItemKind):
    return ActivityDetail if kind == "activity" else ServiceDetail


def _detail_of(base: BaseItem, kind: ItemKind):
    return base.activity if kind == "activity" else base.service


def _base_clauses(kind: ItemKind, filters: Optional[CatalogFilter]) -> list:
    clauses = [BaseItem.type == ItemType(kind)]
    if not filters:
        return clauses
    search = ilike_any(
        [BaseItem.name, BaseItem.short_description, BaseItem.long_description], filters.search
    )
    if search is not None:
        clauses.append(search)
    if filters.area:
        clauses.append(BaseItem.area.ilike(f"%{filters.area}%"))
    if filters.price_range:
        clauses.append(BaseItem.price_range == filters.price_range)
    if filters.featured_only:
        clauses.append(BaseItem.is_featured.is_(True))
    if filters.tags:
        clauses.append(json_tag_clause(BaseItem.tags, filters.tags))
    return clauses


def _detail_clauses(detail_model, filters: Optional[CatalogFilter]) -> list:
    clauses = []
    if filters and filters.category:
        clauses.append(detail_model.category == filters.category)
    if filters and filters.subcategory:
        clauses.append(detail_model.subcategory == filters.subcategory)
    return clauses


class CatalogService:
    """Service class for activities and services."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_item(self, kind: ItemKind, item_id: UUID) -> Optional[CatalogItem]:
        base = await self._get_base(kind, item_id)
        if base is None:
            return None
        detail = _detail_of(base, kind)
        if detail is None:
            logger.warning(f"{kind} {item_id} has no detail row")
            return None
        return catalog_item_from_rows(base, detail)

    async def list_items(
        self,
        kind: ItemKind,
        filters: Optional[CatalogFilter] = None,
        pagination: Optional[PaginationParams] = None,
        sort: Optional[str] = None,
        order: str = "asc",
    ) -> Dict[str, Any]:
        detail_model = _detail_model(kind)
        stmt = (
            select(BaseItem)
            .join(detail_model, detail_model.id == BaseItem.id)
            .where(*_base_clauses(kind, filters), *_detail_clauses(detail_model, filters))
            .options(selectinload(BaseItem.activity), selectinload(BaseItem.service))
        )
        stmt = apply_sort(stmt, BaseItem, sort, order, SORTABLE_COLUMNS, BaseItem.name.asc())
        page = await paginate(self.db, stmt, pagination or PaginationParams())
        page["items"] = [catalog_item_from_rows(base, _detail_of(base, kind)) for base in page["items"]]
        return page

    async def search(
        self, kind: ItemKind, filters: Optional[CatalogFilter] = None, limit: int = 5
    ) -> List[CatalogItem]:
        """
        Two-step lookup: base items matching the shared filters, then the
        detail rows for those ids matching the category filters. Items are
        joined by id; base items without a matching detail row are dropped.
        """
        base_stmt = select(BaseItem).where(*_base_clauses(kind, filters)).limit(limit)
        base_result = await self.db.execute(base_stmt)
        bases = list(base_result.scalars().all())
        if not bases:
            return []

        detail_model = _detail_model(kind)
        detail_stmt = select(detail_model).where(
            detail_model.id.in_([base.id for base in bases]),
            *_detail_clauses(detail_model, filters),
        )
        detail_result = await self.db.execute(detail_stmt)
        details = {detail.id: detail for detail in detail_result.scalars().all()}

        return [catalog_item_from_rows(base, details[base.id]) for base in bases if base.id in details]

    async def count_items(self, kind: ItemKind) -> int:
        detail_model = _detail_model(kind)
        stmt = (
            select(func.count(BaseItem.id))
            .join(detail_model, detail_model.id == BaseItem.id)
            .where(BaseItem.type == ItemType(kind))
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def create_item(self, kind: ItemKind, item_data: CatalogItemBase) -> CatalogItem:
        category = getattr(item_data.category, "value", item_data.category)
        if category not in _CATEGORIES[kind]:
            raise ValidationError(f"Invalid {kind} category: {category}")

        base_fields = item_data.model_dump(mode="json", exclude=set(DETAIL_FIELDS))
        base = BaseItem(type=ItemType(kind), **base_fields)
        detail = self._build_detail(kind, category, item_data.subcategory, item_data.details)

        try:
            self.db.add(base)
            await self.db.flush()
            detail.id = base.id
            self.db.add(detail)
            await self.db.commit()
            logger.info(f"Created {kind} {base.id}")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to create {kind}")
            raise

        item_id = base.id
        self.db.expire_all()
        return await self.get_item(kind, item_id)

    async def update_item(self, kind: ItemKind, item_id: UUID, item_data: CatalogItemUpdate) -> CatalogItem:
        base = await self._get_base(kind, item_id)
        detail = _detail_of(base, kind) if base else None
        if base is None or detail is None:
            raise NotFoundError(f"{kind.capitalize()} not found")

        changes = item_data.model_dump(mode="json", exclude_unset=True)
        if "category" in changes and changes["category"] not in _CATEGORIES[kind]:
            raise ValidationError(f"Invalid {kind} category: {changes['category']}")

        for field, value in changes.items():
            if field == "details":
                setattr(detail, f"{kind}_data", value)
            elif field in DETAIL_FIELDS:
                setattr(detail, field, value)
            else:
                setattr(base, field, value)

        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update {kind} {item_id}")
            raise

        self.db.expire_all()
        return await self.get_item(kind, item_id)

    async def delete_item(self, kind: ItemKind, item_id: UUID) -> bool:
        base = await self._get_base(kind, item_id)
        if base is None:
            raise NotFoundError(f"{kind.capitalize()} not found")
        try:
            detail = _detail_of(base, kind)
            if detail is not None:
                await self.db.delete(detail)
            await self.db.delete(base)
            await self.db.commit()
            return True
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete {kind} {item_id}")
            raise

    async def _get_base(self, kind: ItemKind, item_id: UUID) -> Optional[BaseItem]:
        stmt = (
            select(BaseItem)
            .where(BaseItem.id == item_id, BaseItem.type == ItemType(kind))
            .options(selectinload(BaseItem.activity), selectinload(BaseItem.service))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _build_detail(kind: ItemKind, category: str, subcategory: Any, data: dict):
        subcategory = getattr(subcategory, "value", subcategory)
        if kind == "activity":
            return ActivityDetail(category=category, subcategory=subcategory, activity_data=data)
        return ServiceDetail(category=category, subcategory=subcategory, service_data=data)
