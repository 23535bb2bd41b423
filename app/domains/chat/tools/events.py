"""Upcoming events: date resolution, the two event queries, merge and sort."""

import asyncio
import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Literal, Optional

from pydantic import Field

from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters
from app.domains.event.service import EventService
from app.schemas.event import EventFilter, EventResponse, row_to_event

logger = logging.getLogger(__name__)

TimeFrame = Literal["today", "tomorrow", "this week", "this weekend", "next week", "this month"]

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Weekday names in both languages, 0=Sunday like the ``events.day`` column
WEEKDAYS = {
    "sunday": 0, "monday": 1, "tuesday": 2, "wednesday": 3,
    "thursday": 4, "friday": 5, "saturday": 6,
    "dimanche": 0, "lundi": 1, "mardi": 2, "mercredi": 3,
    "jeudi": 4, "vendredi": 5, "samedi": 6,
}

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "janvier": 1, "février": 2, "fevrier": 2, "mars": 3, "avril": 4, "mai": 5, "juin": 6,
    "juillet": 7, "août": 8, "aout": 8, "septembre": 9, "octobre": 10,
    "novembre": 11, "décembre": 12, "decembre": 12,
}

_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_DAY_NUMBER = re.compile(r"\b(\d{1,2})\b")
_WORD = re.compile(r"[a-zàâçéèêëîïôûùüÿ]+")

POPULAR_VENUES = [
    {
        "name": "Haad Rin",
        "area": "South",
        "description": "Home of the Full Moon Party and busy beach bars most nights",
    },
    {
        "name": "Thong Sala Night Market",
        "area": "Thong Sala",
        "description": "Street food and live music every evening, biggest on Saturdays",
    },
    {
        "name": "Jungle Experience",
        "area": "Baan Tai",
        "description": "Regular jungle parties in the hills behind Baan Tai",
    },
    {
        "name": "Zoom Bar",
        "area": "Baan Tai",
        "description": "Beachfront bar with DJs and fire shows",
    },
    {
        "name": "Srithanu",
        "area": "West",
        "description": "Yoga studios, ecstatic dance and sunset gatherings",
    },
]

SUGGESTIONS = [
    "Ask again for another day or for the whole week",
    "Check the Thong Sala Night Market for food and music any evening",
    "Look for sunset sessions on the west coast around Srithanu",
]


def day_number(day: date) -> int:
    """Weekday of ``day`` with 0=Sunday."""
    return (day.weekday() + 1) % 7


def describe_day(day: date) -> str:
    return f"on {DAY_NAMES[day_number(day)]} {day.day} {MONTH_NAMES[day.month - 1]}"


@dataclass
class DateWindow:
    """Concrete dates to query, plus the weekdays recurring events must fall on."""

    label: str
    dates: list[date]
    weekdays: set[int] = field(default_factory=set)

    def __post_init__(self):
        if not self.weekdays:
            self.weekdays = {day_number(day) for day in self.dates}


def _days(start: date, count: int) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(count)]


def resolve_time_frame(time_frame: str, today: date) -> DateWindow:
    """Turn a coarse time frame into dates. Weeks run Monday to Sunday."""
    monday = today - timedelta(days=today.weekday())
    if time_frame == "today":
        return DateWindow(time_frame, [today])
    if time_frame == "tomorrow":
        return DateWindow(time_frame, [today + timedelta(days=1)])
    if time_frame == "this week":
        return DateWindow(time_frame, _days(monday, 7))
    if time_frame == "this weekend":
        return DateWindow(time_frame, _days(monday + timedelta(days=5), 2))
    if time_frame == "next week":
        return DateWindow(time_frame, _days(monday + timedelta(days=7), 7))
    if time_frame == "this month":
        length = calendar.monthrange(today.year, today.month)[1]
        return DateWindow(time_frame, _days(today.replace(day=1), length))
    raise ValueError(f"Unknown time frame: {time_frame}")


def _day_in_month(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def resolve_date_expression(expression: str, today: date) -> Optional[DateWindow]:
    """
    Resolve a free-text date to a single day.

    Understands ISO dates, ``"19 April"`` / ``"19 avril"``, weekday names in
    English or French (next occurrence, today included) and a bare day of
    the month (this month, or next month once the day has passed).
    Returns ``None`` when nothing in the text looks like a date.
    """
    text = expression.strip().lower()

    iso = _ISO_DATE.search(text)
    if iso:
        target = _day_in_month(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        return DateWindow(describe_day(target), [target]) if target else None

    words = _WORD.findall(text)
    number = _DAY_NUMBER.search(text)
    month = next((MONTHS[word] for word in words if word in MONTHS), None)
    weekday = next((WEEKDAYS[word] for word in words if word in WEEKDAYS), None)

    if month and number:
        target = _day_in_month(today.year, month, int(number.group(1)))
        return DateWindow(describe_day(target), [target]) if target else None

    if weekday is not None:
        target = today + timedelta(days=(weekday - day_number(today)) % 7)
        return DateWindow(describe_day(target), [target])

    if number:
        day = int(number.group(1))
        target = _day_in_month(today.year, today.month, day)
        if target is None or target < today:
            next_month = today.replace(day=1) + timedelta(days=32)
            target = _day_in_month(next_month.year, next_month.month, day)
        return DateWindow(describe_day(target), [target]) if target else None

    return None


def merge_events(
    dated: Iterable[EventResponse], recurring: Iterable[EventResponse]
) -> list[EventResponse]:
    """Union by id; a specific-date event wins over a recurring one."""
    merged: dict[Any, EventResponse] = {}
    for event in dated:
        merged[event.id] = event
    for event in recurring:
        merged.setdefault(event.id, event)
    return list(merged.values())


def event_sort_key(event: EventResponse) -> tuple[int, str]:
    """Monday-first weekday, then time of day as text."""
    weekday = event.day
    time_of_day = event.time or ""
    if "T" in time_of_day:
        day_part, time_of_day = time_of_day.split("T", 1)
        try:
            weekday = day_number(date.fromisoformat(day_part))
        except ValueError:
            pass
    position = (weekday - 1) % 7 if weekday is not None else 7
    return position, time_of_day


def sort_events(events: Iterable[EventResponse]) -> list[EventResponse]:
    return sorted(events, key=event_sort_key)


class EventsParameters(ToolParameters):
    time_frame: TimeFrame = Field(
        default="this week",
        alias="timeFrame",
        description="Time period to search for events",
    )
    date: Optional[str] = Field(
        default=None,
        description=(
            'Specific day instead of the time frame: "19 April", "19 avril", '
            '"saturday", "samedi", a day of the month like "19", or YYYY-MM-DD'
        ),
    )
    category: Optional[str] = Field(default=None, description="Optional category filter")
    tags: Optional[list[str]] = Field(default=None, description="Optional tags to filter by")
    location: Optional[str] = Field(default=None, description="Optional location filter")


async def _load(context: ToolContext, loader) -> list[EventResponse]:
    async with context.session_factory() as db:
        rows = await loader(EventService(db))
        return [row_to_event(row) for row in rows]


async def get_events(params: EventsParameters, context: ToolContext) -> dict[str, Any]:
    today = context.current_date()
    window = None
    if params.date:
        window = resolve_date_expression(params.date, today)
        if window is None:
            logger.info(f"Could not parse event date {params.date!r}, using {params.time_frame}")
    if window is None:
        window = resolve_time_frame(params.time_frame, today)

    filters = EventFilter(category=params.category, tags=params.tags, location=params.location)
    logger.debug(
        f"Event search {window.label}: dates={[d.isoformat() for d in window.dates]} "
        f"weekdays={sorted(window.weekdays)}"
    )

    dated, recurring = await asyncio.gather(
        _load(context, lambda service: service.find_dated_events(window.dates, filters)),
        _load(
            context,
            lambda service: service.find_recurring_events(
                window.weekdays, filters, active_on=window.dates[0]
            ),
        ),
    )
    events = sort_events(merge_events(dated, recurring))
    logger.info(f"Found {len(events)} events for {window.label}")

    result: dict[str, Any] = {
        "events": [event.model_dump(mode="json", by_alias=True) for event in events],
        "count": len(events),
        "timeFrame": window.label,
    }
    if not events:
        result["popularVenues"] = POPULAR_VENUES
        result["suggestions"] = SUGGESTIONS
    return result


events_tool = ChatTool(
    name="getEvents",
    description="Get upcoming events on Koh Phangan based on filters",
    parameters=EventsParameters,
    execute=get_events,
)
