"""Base schemas for the application."""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ResponseSchema(BaseSchema):
    """Standard API response schema."""
    status: str
    message: Optional[str] = None
    data: Optional[Any] = None


class ListMeta(BaseSchema):
    """Pagination block of a dashboard list response."""
    total: int
    page: int
    page_size: int = Field(alias="pageSize")
    page_count: int = Field(alias="pageCount")


class ListResponse(BaseSchema, Generic[T]):
    """Dashboard list response: ``{data, meta}``."""
    data: list[T]
    meta: ListMeta


class SponsorUpdate(BaseSchema):
    """Body of the sponsorship toggle on events and partners."""
    is_sponsored: bool = Field(alias="isSponsored")
    sponsor_end_date: Optional[datetime] = Field(default=None, alias="sponsorEndDate")
