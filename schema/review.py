from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema.common import PageEnvelope


class ReviewCreate(BaseModel):
    company_id: str
    # Range and integrality are checked by the review service so the caller
    # gets an envelope instead of a 422
    rating: float
    content: Optional[str] = None


class ReviewAuthor(BaseModel):
    id: str
    username: str
    name: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewOut(BaseModel):
    id: str
    rating: int
    content: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    author_id: str
    company_id: str
    author: ReviewAuthor

    model_config = ConfigDict(from_attributes=True)


class PaginatedReviewsResponse(PageEnvelope):
    reviews: List[ReviewOut] = Field(default_factory=list)
    average_rating: Optional[float] = None
    user_has_reviewed: bool = False
