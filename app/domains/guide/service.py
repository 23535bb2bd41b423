"""Guide service layer."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import NotFoundError
from app.schemas.guide import GuideCreate, GuideFilter, GuideUpdate
from app.shared.filters import apply_sort, json_tag_clause
from app.shared.pagination import PaginationParams, paginate
from models.guide import Guide

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("name", "category", "is_featured", "last_updated_at", "created_at")


def _filter_clauses(filters: Optional[GuideFilter]) -> list:
    if not filters:
        return []
    clauses = []
    if filters.title:
        pattern = f"%{filters.title}%"
        clauses.append(
            or_(
                Guide.name.ilike(pattern),
                Guide.description["short"].as_string().ilike(pattern),
                Guide.description["long"].as_string().ilike(pattern),
            )
        )
    if filters.category:
        clauses.append(Guide.category == filters.category)
    if filters.location:
        clauses.append(Guide.location["area"].as_string().ilike(f"%{filters.location}%"))
    if filters.tags:
        clauses.append(json_tag_clause(Guide.tags, [tag.lower() for tag in filters.tags], match_all=True))
    return clauses


class GuideService:
    """Service class for guide reads and writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_guide_by_id(self, guide_id: UUID) -> Optional[Guide]:
        result = await self.db.execute(select(Guide).where(Guide.id == guide_id))
        return result.scalar_one_or_none()

    async def list_guides(
        self,
        filters: Optional[GuideFilter] = None,
        pagination: Optional[PaginationParams] = None,
        sort: Optional[str] = None,
        order: str = "desc",
    ) -> Dict[str, Any]:
        stmt = select(Guide).where(*_filter_clauses(filters))
        stmt = apply_sort(stmt, Guide, sort, order, SORTABLE_COLUMNS, Guide.last_updated_at.desc())
        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def search(self, filters: GuideFilter, limit: int = 5) -> Tuple[List[Guide], int]:
        """Matching guides, featured first then most recently updated, and the total match count."""
        clauses = _filter_clauses(filters)
        count_result = await self.db.execute(select(func.count(Guide.id)).where(*clauses))
        total = count_result.scalar() or 0

        stmt = (
            select(Guide)
            .where(*clauses)
            .order_by(Guide.is_featured.desc(), Guide.last_updated_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def create_guide(self, guide_data: GuideCreate) -> Guide:
        guide = Guide(**guide_data.model_dump(mode="json"), last_updated_at=datetime.utcnow())
        try:
            self.db.add(guide)
            await self.db.commit()
            await self.db.refresh(guide)
            logger.info(f"Created guide {guide.id}")
            return guide
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create guide")
            raise

    async def update_guide(self, guide_id: UUID, guide_data: GuideUpdate) -> Guide:
        guide = await self.get_guide_by_id(guide_id)
        if not guide:
            raise NotFoundError("Guide not found")

        for field, value in guide_data.model_dump(mode="json", exclude_unset=True).items():
            setattr(guide, field, value)
        guide.last_updated_at = datetime.utcnow()

        try:
            await self.db.commit()
            await self.db.refresh(guide)
            return guide
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update guide {guide_id}")
            raise

    async def delete_guide(self, guide_id: UUID) -> bool:
        guide = await self.get_guide_by_id(guide_id)
        if not guide:
            raise NotFoundError("Guide not found")
        try:
            await self.db.delete(guide)
            await self.db.commit()
            return True
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete guide {guide_id}")
            raise
