"""Integration tests for the dashboard overview aggregates."""

import pytest

from app.domains.dashboard.service import DashboardService
from app.schemas.event import EventCreate
from app.services import cached_queries
from tests.factories import (
    GuideFactory,
    PartnerFactory,
    bind,
    create_activity,
    create_events,
    create_profile,
    create_service,
)


async def _seed(session):
    await create_profile(session, is_admin=True)
    await create_profile(session)
    await create_profile(session)
    await create_events(
        session,
        {"title": "Full moon", "category": "Party", "is_sponsored": True},
        {"title": "Half moon", "category": "Party"},
        {"title": "Open mic", "category": "Music"},
    )
    bind(session, GuideFactory, PartnerFactory)
    GuideFactory.create(is_featured=True)
    GuideFactory.create(category="visa-immigration")
    PartnerFactory.create(is_sponsored=True)
    await session.commit()
    await create_activity(session)
    await create_activity(session, detail=False)
    await create_service(session)


class TestDashboardOverview:
    @pytest.mark.asyncio
    async def test_totals(self, test_db):
        await _seed(test_db)

        overview = await DashboardService(test_db).get_overview()

        totals = overview.totals
        assert (totals.users, totals.admins) == (3, 1)
        assert (totals.events, totals.sponsored_events) == (3, 1)
        assert (totals.partners, totals.sponsored_partners) == (1, 1)
        assert (totals.guides, totals.featured_guides) == (2, 1)
        # listings without a detail row are not counted
        assert (totals.activities, totals.services) == (1, 1)

    @pytest.mark.asyncio
    async def test_top_categories(self, test_db):
        await _seed(test_db)

        overview = await DashboardService(test_db).get_overview(top=1)

        assert [(c.category, c.count) for c in overview.top_event_categories] == [("Party", 2)]
        assert len(overview.top_guide_categories) == 1

    @pytest.mark.asyncio
    async def test_cached_overview_follows_writes(self, test_db):
        await _seed(test_db)
        before = await cached_queries.get_dashboard_overview(test_db)

        # rows written around the cache layer are not seen until it expires
        await create_events(test_db, {"title": "Side door", "category": "Music"})
        assert (await cached_queries.get_dashboard_overview(test_db)).totals.events == 3

        await cached_queries.create_event(test_db, EventCreate(title="Front door", category="Music", time="21:00"))
        assert (await cached_queries.get_dashboard_overview(test_db)).totals.events == before.totals.events + 2
