"""Guide search for the assistant."""

import logging
from typing import Any, Optional

from pydantic import Field

from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters
from app.domains.guide.service import GuideService
from app.schemas.guide import GuideCategory, GuideFilter, GuideResponse

logger = logging.getLogger(__name__)


class GuidesParameters(ToolParameters):
    title: Optional[str] = Field(
        default=None,
        description="Keywords from the title or description of the guide to search for",
    )
    category: Optional[GuideCategory] = Field(
        default=None,
        description="Specific category of the guide (e.g., visa-immigration, transports-locaux)",
    )
    location: Optional[str] = Field(
        default=None,
        description="General location area relevant to the guide (e.g., North, South)",
    )
    tags: Optional[list[str]] = Field(
        default=None,
        description="Specific keywords or tags associated with the guide (e.g., visa, yoga, beach)",
    )
    limit: int = Field(default=5, ge=1, le=50, description="Maximum number of guides to return")


async def get_guides(params: GuidesParameters, context: ToolContext) -> dict[str, Any]:
    filters = GuideFilter(
        title=params.title,
        category=params.category.value if params.category else None,
        location=params.location,
        tags=params.tags,
    )
    async with context.session_factory() as db:
        guides, total = await GuideService(db).search(filters, limit=params.limit)

    logger.info(f"Found {len(guides)} guides (total matches: {total})")
    return {
        "guides": [
            GuideResponse.model_validate(guide).model_dump(mode="json", by_alias=True)
            for guide in guides
        ],
        "count": total,
    }


guides_tool = ChatTool(
    name="getGuides",
    description=(
        "Search for practical guides about life on Koh Phangan (visas, health, transport, "
        "housing, culture, wellness) by title, category, location area or tags."
    ),
    parameters=GuidesParameters,
    execute=get_guides,
)
