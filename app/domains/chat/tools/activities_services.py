"""Activities and services search for the assistant."""

import logging
import re
from typing import Any, Iterable, Literal, Optional

from pydantic import Field
from sqlalchemy.exc import SQLAlchemyError

from app.domains.catalog.service import CatalogService
from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters
from app.schemas.catalog import CatalogFilter, CatalogItem, CatalogToolItem, ItemKind, Subcategory

logger = logging.getLogger(__name__)

# French and English words people use, mapped to the tags listings carry
SYNONYMS: dict[str, list[str]] = {
    "voiture": ["car_rental", "car"],
    "location de voiture": ["car_rental"],
    "car": ["car_rental"],
    "car rental": ["car_rental"],
    "rent a car": ["car_rental"],
    "jeep": ["car_rental"],
    "scooter": ["scooter_rental", "scooter"],
    "moto": ["scooter_rental", "scooter"],
    "motorbike": ["scooter_rental", "scooter"],
    "vélo": ["bike_rental"],
    "velo": ["bike_rental"],
    "bike": ["bike_rental"],
    "massage": ["massage", "spa"],
    "plongée": ["diving"],
    "plongee": ["diving"],
    "dive": ["diving"],
    "diving": ["diving"],
    "hôtel": ["hotel"],
    "hotel": ["hotel"],
    "resto": ["restaurant"],
    "restaurant": ["restaurant"],
    "bateau": ["boat_tour", "ferry"],
    "boat": ["boat_tour", "ferry"],
    "médecin": ["doctor", "clinic"],
    "medecin": ["doctor", "clinic"],
    "pharmacie": ["pharmacy"],
    "hôpital": ["hospital"],
    "hopital": ["hospital"],
    "marché": ["market"],
    "marche": ["market"],
}

CAR_RENTAL_TERMS = {"voiture", "location de voiture", "car", "car rental", "rent a car", "jeep", "car_rental"}

RESULT_KEYS = {"activity": "activities", "service": "services"}


def _mentions(text: str, term: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text) is not None


def _query_text(search: Optional[str], tags: Optional[Iterable[str]], subcategory: Optional[str]) -> str:
    parts = [search or "", subcategory or "", *(tags or [])]
    return " ".join(parts).lower()


def expand_tags(search: Optional[str], tags: Optional[list[str]]) -> list[str]:
    """The caller's tags plus the synonym tags of every known term they used."""
    text = _query_text(search, tags, None)
    expanded = list(tags or [])
    for term, extra in SYNONYMS.items():
        if _mentions(text, term):
            expanded.extend(tag for tag in extra if tag not in expanded)
    return expanded


def wants_car_rental(search: Optional[str], tags: Optional[list[str]], subcategory: Optional[str]) -> bool:
    text = _query_text(search, tags, subcategory)
    return any(_mentions(text, term) for term in CAR_RENTAL_TERMS)


def _tool_items(items: list[CatalogItem]) -> list[dict[str, Any]]:
    return [
        CatalogToolItem.model_validate(item).model_dump(mode="json", by_alias=True)
        for item in items
    ]


class ActivitiesServicesParameters(ToolParameters):
    type: Literal["activity", "service", "both"] = Field(
        description="Type of items to search for: activity, service, or both"
    )
    category: Optional[str] = Field(
        default=None,
        description='Optional category filter (e.g., "food_drink" for activities or "accommodation" for services)',
    )
    subcategory: Optional[str] = Field(
        default=None,
        description='Optional subcategory filter (e.g., "restaurant", "scooter_rental", "spa")',
    )
    area: Optional[str] = Field(
        default=None, description='Optional area/location filter (e.g., "Thong Sala", "Srithanu")'
    )
    search: Optional[str] = Field(
        default=None, description="Optional text to search in names and descriptions"
    )
    tags: Optional[list[str]] = Field(default=None, description="Optional tags to filter by")
    price_range: Optional[str] = Field(
        default=None,
        alias="priceRange",
        description='Optional price range filter (e.g., "budget", "mid-range", "luxury")',
    )
    featured_only: Optional[bool] = Field(
        default=None, alias="featuredOnly", description="If true, return only featured items"
    )
    limit: int = Field(default=5, ge=1, le=50, description="Maximum number of results to return per type")


async def get_activities_services(
    params: ActivitiesServicesParameters, context: ToolContext
) -> dict[str, Any]:
    kinds: list[ItemKind] = ["activity", "service"] if params.type == "both" else [params.type]
    tags = expand_tags(params.search, params.tags)
    filters = CatalogFilter(
        category=params.category,
        subcategory=params.subcategory,
        area=params.area,
        search=params.search,
        tags=tags or None,
        price_range=params.price_range,
        featured_only=bool(params.featured_only),
    )

    results: dict[str, Any] = {"count": 0}
    try:
        async with context.session_factory() as db:
            service = CatalogService(db)
            for kind in kinds:
                items = await service.search(kind, filters, limit=params.limit)
                results[RESULT_KEYS[kind]] = _tool_items(items)
                results["count"] += len(items)

            if results["count"] == 0 and wants_car_rental(params.search, params.tags, params.subcategory):
                logger.info("No direct match, falling back to car rental services")
                fallback = CatalogFilter(subcategory=Subcategory.CAR_RENTAL.value, area=params.area)
                items = await service.search("service", fallback, limit=params.limit)
                results["services"] = _tool_items(items)
                results["count"] = len(results.get("activities", [])) + len(items)
    except SQLAlchemyError:
        logger.exception("Error searching activities and services")
        return {"error": "Failed to search activities and services", "count": 0}

    results["searchParams"] = {
        "type": params.type,
        "category": params.category or "all",
        "area": params.area or "all island",
        "search": params.search or "",
        "tags": tags,
        "priceRange": params.price_range or "any",
    }
    return results


activities_services_tool = ChatTool(
    name="getActivitiesServices",
    description="Search for activities and services on Koh Phangan with various filters",
    parameters=ActivitiesServicesParameters,
    execute=get_activities_services,
)
