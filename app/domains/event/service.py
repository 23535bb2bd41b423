"""Event service layer."""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import NotFoundError
from app.schemas.base import SponsorUpdate
from app.schemas.event import EventCreate, EventFilter, EventUpdate, event_to_row
from app.shared.filters import apply_sort, ilike_any, json_tag_clause
from app.shared.pagination import PaginationParams, paginate
from models.event import Event

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("title", "category", "time", "day", "rating", "created_at", "updated_at")


def _filter_clauses(filters: Optional[EventFilter]) -> list:
    if not filters:
        return []
    clauses = []
    search = ilike_any([Event.title, Event.description, Event.location], filters.search)
    if search is not None:
        clauses.append(search)
    if filters.category:
        clauses.append(Event.category.ilike(f"%{filters.category}%"))
    if filters.location:
        clauses.append(Event.location.ilike(f"%{filters.location}%"))
    if filters.tags:
        clauses.append(json_tag_clause(Event.tags, filters.tags))
    return clauses


class EventService:
    """Service class for event reads and writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_event_by_id(self, event_id: UUID) -> Optional[Event]:
        result = await self.db.execute(select(Event).where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def list_events(
        self,
        filters: Optional[EventFilter] = None,
        pagination: Optional[PaginationParams] = None,
        sort: Optional[str] = None,
        order: str = "desc",
    ) -> Dict[str, Any]:
        stmt = select(Event).where(*_filter_clauses(filters))
        stmt = apply_sort(stmt, Event, sort, order, SORTABLE_COLUMNS, Event.created_at.desc())
        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def find_dated_events(
        self, dates: Iterable[date], filters: Optional[EventFilter] = None
    ) -> List[Event]:
        """Events whose ``time`` starts with one of ``dates`` (YYYY-MM-DD)."""
        prefixes = [f"{day.isoformat()}%" for day in dates]
        if not prefixes:
            return []
        stmt = select(Event).where(
            or_(*[Event.time.like(prefix) for prefix in prefixes]),
            *_filter_clauses(filters),
        )
        result = await self.db.execute(stmt.order_by(Event.time))
        return list(result.scalars().all())

    async def find_recurring_events(
        self,
        weekdays: Iterable[int],
        filters: Optional[EventFilter] = None,
        active_on: Optional[date] = None,
    ) -> List[Event]:
        """
        Recurring events held on any of ``weekdays`` (0=Sunday..6=Saturday).

        A series whose end date is before ``active_on`` is left out.
        """
        days = sorted(set(weekdays))
        if not days:
            return []
        clauses = [
            Event.recurrence_pattern.isnot(None),
            Event.recurrence_pattern != "once",
            Event.day.in_(days),
        ]
        if active_on:
            clauses.append(
                or_(
                    Event.recurrence_end_date.is_(None),
                    Event.recurrence_end_date == "",
                    Event.recurrence_end_date >= active_on.isoformat(),
                )
            )
        stmt = select(Event).where(and_(*clauses), *_filter_clauses(filters))
        result = await self.db.execute(stmt.order_by(Event.day, Event.time))
        return list(result.scalars().all())

    async def create_event(self, event_data: EventCreate) -> Event:
        event = Event(**event_to_row(event_data))
        try:
            self.db.add(event)
            await self.db.commit()
            await self.db.refresh(event)
            logger.info(f"Created event {event.id}")
            return event
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create event")
            raise

    async def update_event(self, event_id: UUID, event_data: EventUpdate) -> Event:
        event = await self.get_event_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")

        for field, value in event_to_row(event_data, partial=True).items():
            setattr(event, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(event)
            return event
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update event {event_id}")
            raise

    async def set_sponsorship(self, event_id: UUID, sponsor: SponsorUpdate) -> Event:
        event = await self.get_event_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        event.is_sponsored = sponsor.is_sponsored
        event.sponsor_end_date = sponsor.sponsor_end_date if sponsor.is_sponsored else None
        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def delete_event(self, event_id: UUID) -> bool:
        event = await self.get_event_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        try:
            await self.db.delete(event)
            await self.db.commit()
            return True
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete event {event_id}")
            raise
