"""Dashboard overview: aggregate counts across the directory."""

from typing import List

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.domains.catalog.service import CatalogService
from app.domains.user.service import UserService
from app.schemas.dashboard import CategoryCount, DashboardOverview, OverviewTotals
from models.event import Event
from models.guide import Guide
from models.partner import Partner


class DashboardService:
    """Builds the admin overview from aggregate queries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_overview(self, top: int = 5) -> DashboardOverview:
        users = UserService(self.db)
        catalog = CatalogService(self.db)

        totals = OverviewTotals(
            users=await users.count_profiles(),
            admins=await users.count_profiles(admins_only=True),
            events=await self._count(Event),
            sponsored_events=await self._count(Event, Event.is_sponsored.is_(True)),
            partners=await self._count(Partner),
            sponsored_partners=await self._count(Partner, Partner.is_sponsored.is_(True)),
            guides=await self._count(Guide),
            featured_guides=await self._count(Guide, Guide.is_featured.is_(True)),
            activities=await catalog.count_items("activity"),
            services=await catalog.count_items("service"),
        )

        return DashboardOverview(
            totals=totals,
            top_event_categories=await self._top_categories(Event, top),
            top_partner_categories=await self._top_categories(Partner, top),
            top_guide_categories=await self._top_categories(Guide, top),
        )

    async def _count(self, model, *clauses) -> int:
        result = await self.db.execute(select(func.count(model.id)).where(*clauses))
        return result.scalar() or 0

    async def _top_categories(self, model, top: int) -> List[CategoryCount]:
        count = func.count(model.id).label("count")
        stmt = (
            select(model.category, count)
            .group_by(model.category)
            .order_by(count.desc(), model.category.asc())
            .limit(top)
        )
        result = await self.db.execute(stmt)
        return [CategoryCount(category=category, count=total) for category, total in result.all()]
