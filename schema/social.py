from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema.common import ActionResult, PageEnvelope


# ------------------------------------------------------------
# Author projection shared by posts and comments
# ------------------------------------------------------------
class AuthorSummary(BaseModel):
    id: str
    name: Optional[str] = None
    username: str
    image: Optional[str] = None
    is_company: bool = False

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------
# Comments
# ------------------------------------------------------------
class CommentCreate(BaseModel):
    content: str = ""


class CommentOut(BaseModel):
    id: str
    post_id: str
    content: str
    created_at: datetime
    author: AuthorSummary

    model_config = ConfigDict(from_attributes=True)


class CommentResult(ActionResult):
    comment: Optional[CommentOut] = None


# ------------------------------------------------------------
# Posts
# ------------------------------------------------------------
class PostCreate(BaseModel):
    content: Optional[str] = None
    image: Optional[str] = None


class LikeOut(BaseModel):
    user_id: str

    model_config = ConfigDict(from_attributes=True)


class PostOut(BaseModel):
    id: str
    content: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    comments: List[CommentOut] = Field(default_factory=list)
    # Lets the client decide locally whether the viewer has liked the post
    likes: List[LikeOut] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0


class PostResult(ActionResult):
    post: Optional[PostOut] = None


class LikeResult(ActionResult):
    liked: bool = False
    like_count: int = 0


class PostFilters(BaseModel):
    search_term: Optional[str] = None
    categories: Optional[List[str]] = None
    location: Optional[str] = None


class PaginatedPostsResponse(PageEnvelope):
    posts: List[PostOut] = Field(default_factory=list)


class PostListResponse(ActionResult):
    posts: List[PostOut] = Field(default_factory=list)


__all__ = [
    "AuthorSummary",
    "CommentCreate",
    "CommentOut",
    "CommentResult",
    "PostCreate",
    "LikeOut",
    "PostOut",
    "PostResult",
    "LikeResult",
    "PostFilters",
    "PaginatedPostsResponse",
    "PostListResponse",
]
