"""
Integration tests for the activity and service catalog.

Covers the two-step search, the joined aggregate returned by every read, and
the assistant tool built on top of it.
"""

import pytest

from app.domains.catalog.service import CatalogService
from app.domains.chat.tools import ToolContext
from app.domains.chat.tools.activities_services import activities_services_tool
from app.exceptions.base import NotFoundError, ValidationError
from app.schemas.catalog import ActivityCreate, CatalogFilter, CatalogItemUpdate
from tests.factories import create_activity, create_service


@pytest.fixture
def context(session_factory):
    return ToolContext(session_factory=session_factory)


async def _seed(session):
    await create_activity(session, name="Sail Rock Divers", tags=["diving"], area="Chaloklum")
    await create_activity(session, name="Reef Academy", tags=["diving", "snorkel"], area="Thong Sala")
    await create_activity(session, name="Orphan Dive Shop", tags=["diving"], detail=False)
    await create_service(session, name="Easy Scooters", tags=["scooter_rental"], area="Thong Sala")


class TestCatalogService:
    @pytest.mark.asyncio
    async def test_search_drops_items_without_detail_row(self, test_db):
        await _seed(test_db)

        items = await CatalogService(test_db).search("activity", CatalogFilter(), limit=10)

        assert sorted(item.name for item in items) == ["Reef Academy", "Sail Rock Divers"]
        assert all(item.type == "activity" and item.category == "leisure" for item in items)

    @pytest.mark.asyncio
    async def test_search_applies_detail_filters(self, test_db):
        await _seed(test_db)
        await create_activity(test_db, name="Night Market", category="shopping", subcategory="market")

        items = await CatalogService(test_db).search("activity", CatalogFilter(category="shopping"), limit=10)

        assert [item.name for item in items] == ["Night Market"]

    @pytest.mark.asyncio
    async def test_list_items_is_paginated(self, test_db):
        await _seed(test_db)

        page = await CatalogService(test_db).list_items("activity")

        assert page["meta"].total == 2
        assert [item.name for item in page["items"]] == ["Reef Academy", "Sail Rock Divers"]

    @pytest.mark.asyncio
    async def test_create_update_delete(self, test_db):
        service = CatalogService(test_db)
        created = await service.create_item(
            "activity",
            ActivityCreate(name="Muay Thai Camp", category="leisure", tags=["fitness"], details={"level": "all"}),
        )

        assert created.type == "activity"
        assert created.details == {"level": "all"}

        updated = await service.update_item(
            "activity", created.id, CatalogItemUpdate(area="Baan Tai", details={"level": "pro"})
        )
        assert updated.area == "Baan Tai"
        assert updated.details == {"level": "pro"}
        assert updated.name == "Muay Thai Camp"

        assert await service.delete_item("activity", created.id) is True
        assert await service.get_item("activity", created.id) is None

    @pytest.mark.asyncio
    async def test_update_rejects_category_of_other_kind(self, test_db):
        service = CatalogService(test_db)
        created = await service.create_item("activity", ActivityCreate(name="Cooking Class", category="culture"))

        with pytest.raises(ValidationError):
            await service.update_item("activity", created.id, CatalogItemUpdate(category="mobility"))

    @pytest.mark.asyncio
    async def test_update_missing_item(self, test_db):
        import uuid

        with pytest.raises(NotFoundError):
            await CatalogService(test_db).update_item("service", uuid.uuid4(), CatalogItemUpdate(area="x"))


class TestActivitiesServicesTool:
    @pytest.mark.asyncio
    async def test_both_kinds_count_matches_results(self, test_db, context):
        await _seed(test_db)

        result = await activities_services_tool.run({"type": "both"}, context)

        assert len(result["activities"]) == 2
        assert len(result["services"]) == 1
        assert result["count"] == len(result["activities"]) + len(result["services"])
        assert result["searchParams"] == {
            "type": "both",
            "category": "all",
            "area": "all island",
            "search": "",
            "tags": [],
            "priceRange": "any",
        }

    @pytest.mark.asyncio
    async def test_tool_items_carry_kind_specific_data(self, test_db, context):
        await _seed(test_db)

        result = await activities_services_tool.run({"type": "service"}, context)

        item = result["services"][0]
        assert item["name"] == "Easy Scooters"
        assert item["serviceData"] == {}
        assert item["activityData"] is None
        assert "shortDescription" in item
        assert "activities" not in result

    @pytest.mark.asyncio
    async def test_french_search_term_expands_tags(self, test_db, context):
        await _seed(test_db)

        result = await activities_services_tool.run({"type": "activity", "tags": ["plongée"]}, context)

        assert result["count"] == 2
        assert result["searchParams"]["tags"] == ["plongée", "diving"]

    @pytest.mark.asyncio
    async def test_car_rental_fallback(self, test_db, context):
        await _seed(test_db)
        await create_service(test_db, name="Island Wheels", subcategory="car_rental", area="Thong Sala")

        result = await activities_services_tool.run({"type": "activity", "search": "voiture"}, context)

        assert result["activities"] == []
        assert [item["name"] for item in result["services"]] == ["Island Wheels"]
        assert result["count"] == 1

    @pytest.mark.asyncio
    async def test_type_is_required(self, context):
        result = await activities_services_tool.run({}, context)
        assert "error" in result
