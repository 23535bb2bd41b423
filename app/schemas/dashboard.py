"""Dashboard overview schemas."""

from app.schemas.base import BaseSchema


class CategoryCount(BaseSchema):
    category: str
    count: int


class OverviewTotals(BaseSchema):
    users: int
    admins: int
    events: int
    sponsored_events: int
    partners: int
    sponsored_partners: int
    guides: int
    featured_guides: int
    activities: int
    services: int


class DashboardOverview(BaseSchema):
    totals: OverviewTotals
    top_event_categories: list[CategoryCount]
    top_partner_categories: list[CategoryCount]
    top_guide_categories: list[CategoryCount]
