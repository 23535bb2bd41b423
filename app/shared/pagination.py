"""Pagination utilities."""

from typing import Any, Dict

from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select

from app.schemas.base import ListMeta


class PaginationParams(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    page_size: int = Field(default=10, ge=1, le=100, description="Page size")


async def paginate(db: AsyncSession, query: Select, pagination: PaginationParams) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query.

    Args:
        db: Database session
        query: SQLAlchemy select query
        pagination: Pagination parameters

    Returns:
        Dictionary with the page of items and a ``ListMeta``
    """

    # Count over the unpaginated query
    subquery = query.order_by(None).subquery()
    count_query = select(func.count()).select_from(subquery)
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    page_count = (total + pagination.page_size - 1) // pagination.page_size  # Ceiling division

    offset = (pagination.page - 1) * pagination.page_size
    paginated_query = query.offset(offset).limit(pagination.page_size)

    result = await db.execute(paginated_query)
    items = result.scalars().all()

    return {
        "items": items,
        "meta": ListMeta(
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            page_count=page_count,
        ),
    }
