"""Partner service layer."""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import NotFoundError
from app.schemas.base import SponsorUpdate
from app.schemas.partner import PartnerCreate, PartnerFilter, PartnerUpdate, partner_to_row
from app.shared.filters import apply_sort, json_tag_clause
from app.shared.pagination import PaginationParams, paginate
from models.partner import Partner

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("name", "category", "rating", "created_at", "updated_at")


def _filter_clauses(filters: Optional[PartnerFilter]) -> list:
    if not filters:
        return []
    clauses = []
    if filters.name:
        clauses.append(Partner.name.ilike(f"%{filters.name}%"))
    if filters.category:
        clauses.append(Partner.category == filters.category)
    if filters.subcategory:
        clauses.append(Partner.subcategory == filters.subcategory)
    if filters.location:
        pattern = f"%{filters.location}%"
        clauses.append(
            or_(
                Partner.location["address"].as_string().ilike(pattern),
                Partner.location["area"].as_string().ilike(pattern),
            )
        )
    if filters.tags:
        clauses.append(json_tag_clause(Partner.tags, [tag.lower() for tag in filters.tags], match_all=True))
    return clauses


class PartnerService:
    """Service class for partner reads and writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_partner_by_id(self, partner_id: UUID) -> Optional[Partner]:
        result = await self.db.execute(select(Partner).where(Partner.id == partner_id))
        return result.scalar_one_or_none()

    async def list_partners(
        self,
        filters: Optional[PartnerFilter] = None,
        pagination: Optional[PaginationParams] = None,
        sort: Optional[str] = None,
        order: str = "asc",
    ) -> Dict[str, Any]:
        stmt = select(Partner).where(*_filter_clauses(filters))
        stmt = apply_sort(stmt, Partner, sort, order, SORTABLE_COLUMNS, Partner.name.asc())
        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def search(self, filters: PartnerFilter, limit: int = 10) -> Tuple[List[Partner], int]:
        """Matching partners ordered by name, and the total match count."""
        clauses = _filter_clauses(filters)
        count_result = await self.db.execute(select(func.count(Partner.id)).where(*clauses))
        total = count_result.scalar() or 0

        stmt = select(Partner).where(*clauses).order_by(Partner.name.asc()).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def create_partner(self, partner_data: PartnerCreate) -> Partner:
        partner = Partner(**partner_to_row(partner_data))
        try:
            self.db.add(partner)
            await self.db.commit()
            await self.db.refresh(partner)
            logger.info(f"Created partner {partner.id}")
            return partner
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create partner")
            raise

    async def update_partner(self, partner_id: UUID, partner_data: PartnerUpdate) -> Partner:
        partner = await self.get_partner_by_id(partner_id)
        if not partner:
            raise NotFoundError("Partner not found")

        for field, value in partner_to_row(partner_data, partial=True).items():
            setattr(partner, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(partner)
            return partner
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update partner {partner_id}")
            raise

    async def set_sponsorship(self, partner_id: UUID, sponsor: SponsorUpdate) -> Partner:
        partner = await self.get_partner_by_id(partner_id)
        if not partner:
            raise NotFoundError("Partner not found")
        partner.is_sponsored = sponsor.is_sponsored
        partner.sponsor_end_date = sponsor.sponsor_end_date if sponsor.is_sponsored else None
        await self.db.commit()
        await self.db.refresh(partner)
        return partner

    async def delete_partner(self, partner_id: UUID) -> bool:
        partner = await self.get_partner_by_id(partner_id)
        if not partner:
            raise NotFoundError("Partner not found")
        try:
            await self.db.delete(partner)
            await self.db.commit()
            return True
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete partner {partner_id}")
            raise
