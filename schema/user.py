from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema.common import ActionResult


class ProfileOut(BaseModel):
    id: str
    clerk_id: str
    username: str
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    image: Optional[str] = None
    background_image: Optional[str] = None
    is_company: bool = False
    categories: List[str] = Field(default_factory=list)
    profile_views: int = 0
    created_at: datetime

    follower_count: int = 0
    following_count: int = 0
    post_count: int = 0
    # Only meaningful for companies; None when there are no reviews
    review_count: int = 0
    average_rating: Optional[float] = None
    is_following: bool = False


class ProfileResponse(ActionResult):
    profile: Optional[ProfileOut] = None


class ProfileUpdate(BaseModel):
    """Patch semantics: only fields present in the payload are written."""
    name: Optional[str] = None
    bio: Optional[str] = None
    is_company: Optional[bool] = None
    location: Optional[str] = None
    website: Optional[str] = None
    categories: Optional[List[str]] = None
    image: Optional[str] = None
    background_image: Optional[str] = None


class ProfileUpdateResult(ActionResult):
    profile: Optional[ProfileOut] = None


class CompanySummary(BaseModel):
    id: str
    name: Optional[str] = None
    username: str
    image: Optional[str] = None
    follower_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class FollowResult(ActionResult):
    is_following: bool = False


class FollowStatsOut(BaseModel):
    user_id: str
    follower_count: int
    following_count: int
    is_following: bool
