from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from model.service_area import ScopeType
from schema.common import PageEnvelope


class CompanySort(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    NEWEST = "newest"
    MOST_FOLLOWED = "most_followed"
    REVIEWS_DESC = "reviews_desc"
    RATING_DESC = "rating_desc"


class CompanyFilters(BaseModel):
    search_term: Optional[str] = None
    categories: Optional[List[str]] = None
    location: Optional[str] = None
    scope: Optional[ScopeType] = None
    region_id: Optional[str] = None
    commune_id: Optional[str] = None
    sort_by: CompanySort = CompanySort.NAME_ASC


class CompanyCard(BaseModel):
    id: str
    clerk_id: str
    name: Optional[str] = None
    username: str
    image: Optional[str] = None
    background_image: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    follower_count: int = 0
    review_count: int = 0
    # None when the company has no reviews, never 0
    average_rating: Optional[float] = None
    is_following: bool = False


class PaginatedCompaniesResponse(PageEnvelope):
    companies: List[CompanyCard] = Field(default_factory=list)
