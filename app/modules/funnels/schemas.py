from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any, Literal
from datetime import datetime


class FunnelCreate(BaseModel):
    name: str
    template: Optional[Any] = None  # Any non-null value requests the default landing page

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required and must be a non-empty string")
        return value


FunnelSortField = Literal["created_at", "updated_at", "name"]
SortOrder = Literal["asc", "desc"]


class PageCreate(BaseModel):
    name: str = Field(max_length=100, pattern=r"^[a-zA-Z0-9\s\-_]+$")
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9\-]+$")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Page name is required")
        return value


class PageSummary(BaseModel):
    id: str
    name: str
    slug: str
    created_at: datetime


class PageResponse(PageSummary):
    funnel_id: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FunnelResponse(BaseModel):
    id: str
    user_id: str
    name: str
    published: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None
    pages: List[PageSummary] = []

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    limit: int
    offset: int
    total: int
    has_more: bool = Field(serialization_alias="hasMore")


class FunnelListResponse(BaseModel):
    funnels: List[FunnelResponse]
    pagination: Pagination


class FunnelCreateResponse(BaseModel):
    funnel: FunnelResponse
    message: str
    page_created: bool = Field(serialization_alias="pageCreated")


class FunnelPagesResponse(BaseModel):
    pages: List[PageResponse]
    funnel: FunnelResponse


class PageCreateResponse(BaseModel):
    page: PageResponse
    message: str
