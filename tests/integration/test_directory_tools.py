"""Integration tests for the guide and partner search tools."""

import pytest

from app.domains.chat.tools import ToolContext
from app.domains.chat.tools.guides import guides_tool
from app.domains.chat.tools.partners import partners_tool
from tests.factories import GuideFactory, PartnerFactory, bind


@pytest.fixture
def context(session_factory):
    return ToolContext(session_factory=session_factory)


async def _seed_guides(session):
    bind(session, GuideFactory)
    GuideFactory.create(name="Secret beaches", tags=["beach", "sunset"], location={"address": "", "area": "North"})
    GuideFactory.create(name="Family beaches", tags=["beach", "kids"], location={"address": "", "area": "South"})
    GuideFactory.create(name="Beach clean-ups", tags=["beach"], is_featured=True)
    GuideFactory.create(
        name="Visa runs",
        category="visa-immigration",
        tags=["visa"],
        description={"short": "Extending your stay", "long": "Immigration office in Thong Sala"},
    )
    await session.commit()


async def _seed_partners(session):
    bind(session, PartnerFactory)
    PartnerFactory.create(name="Baan Thai Kitchen", tags=["thai", "vegan"])
    PartnerFactory.create(name="Jungle Thai", tags=["thai"], location={"address": "Jungle road", "area": "Srithanu"})
    PartnerFactory.create(name="Sunrise Scooters", category="location-scooter", tags=["delivery"])
    await session.commit()


class TestGuidesTool:
    @pytest.mark.asyncio
    async def test_count_is_total_matches_not_page_size(self, test_db, context):
        await _seed_guides(test_db)

        result = await guides_tool.run({"tags": ["beach"], "limit": 1}, context)

        assert result["count"] == 3
        assert len(result["guides"]) == 1
        # featured guides come first
        assert result["guides"][0]["name"] == "Beach clean-ups"

    @pytest.mark.asyncio
    async def test_all_tags_must_match(self, test_db, context):
        await _seed_guides(test_db)

        result = await guides_tool.run({"tags": ["Beach", "sunset"]}, context)

        assert [guide["name"] for guide in result["guides"]] == ["Secret beaches"]

    @pytest.mark.asyncio
    async def test_title_searches_descriptions(self, test_db, context):
        await _seed_guides(test_db)

        result = await guides_tool.run({"title": "immigration"}, context)

        assert [guide["name"] for guide in result["guides"]] == ["Visa runs"]

    @pytest.mark.asyncio
    async def test_location_matches_area(self, test_db, context):
        await _seed_guides(test_db)

        result = await guides_tool.run({"location": "south"}, context)

        assert [guide["name"] for guide in result["guides"]] == ["Family beaches"]

    @pytest.mark.asyncio
    async def test_unknown_category_is_reported(self, context):
        result = await guides_tool.run({"category": "nightlife"}, context)
        assert result["error"].startswith("Invalid arguments for getGuides")


class TestPartnersTool:
    @pytest.mark.asyncio
    async def test_filters_and_total(self, test_db, context):
        await _seed_partners(test_db)

        result = await partners_tool.run({"category": "restaurant", "limit": 1}, context)

        assert result["count"] == 2
        assert [partner["name"] for partner in result["partners"]] == ["Baan Thai Kitchen"]

    @pytest.mark.asyncio
    async def test_location_matches_address_or_area(self, test_db, context):
        await _seed_partners(test_db)

        by_area = await partners_tool.run({"location": "srithanu"}, context)
        by_address = await partners_tool.run({"location": "jungle road"}, context)

        assert [p["name"] for p in by_area["partners"]] == ["Jungle Thai"]
        assert [p["name"] for p in by_address["partners"]] == ["Jungle Thai"]

    @pytest.mark.asyncio
    async def test_tags_and_name(self, test_db, context):
        await _seed_partners(test_db)

        result = await partners_tool.run({"name": "thai", "tags": ["thai", "vegan"]}, context)

        assert result["count"] == 1
        assert result["partners"][0]["name"] == "Baan Thai Kitchen"
