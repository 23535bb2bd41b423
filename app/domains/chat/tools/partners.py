"""Partner search for the assistant."""

import logging
from typing import Any, Optional

from pydantic import Field

from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters
from app.domains.partner.service import PartnerService
from app.schemas.partner import PartnerCategory, PartnerFilter, row_to_partner

logger = logging.getLogger(__name__)


class PartnersParameters(ToolParameters):
    name: Optional[str] = Field(
        default=None,
        description="Name of the partner or business to search for (partial match allowed)",
    )
    category: Optional[PartnerCategory] = Field(
        default=None,
        description="Category of the partner (e.g., restaurant, location-scooter, spa)",
    )
    subcategory: Optional[str] = Field(
        default=None, description="Specific subcategory of the partner"
    )
    location: Optional[str] = Field(
        default=None,
        description="General location, address, area, or neighborhood to search within",
    )
    tags: Optional[list[str]] = Field(
        default=None,
        description="Services, features or keywords to filter by (e.g., vegan, delivery, wifi)",
    )
    limit: int = Field(default=10, ge=1, le=50, description="Maximum number of partners to return")


async def get_partners(params: PartnersParameters, context: ToolContext) -> dict[str, Any]:
    filters = PartnerFilter(
        name=params.name,
        category=params.category,
        subcategory=params.subcategory,
        location=params.location,
        tags=params.tags,
    )
    async with context.session_factory() as db:
        partners, total = await PartnerService(db).search(filters, limit=params.limit)

    logger.info(f"Found {len(partners)} partners (total matches: {total})")
    return {
        "partners": [
            row_to_partner(partner).model_dump(mode="json", by_alias=True) for partner in partners
        ],
        "count": total,
    }


partners_tool = ChatTool(
    name="getPartners",
    description=(
        "Get partners (businesses, services, etc.) based on filters like name, category, "
        "subcategory, location, or tags/features offered."
    ),
    parameters=PartnersParameters,
    execute=get_partners,
)
