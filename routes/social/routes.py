from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.common import ActionResult
from schema.social import (
    CommentCreate,
    CommentResult,
    LikeResult,
    PaginatedPostsResponse,
    PostCreate,
    PostFilters,
    PostResult,
)
from services import posts as post_service
from src.route_helpers import viewer_id_of

router = APIRouter(
    prefix="/v1/social",
    tags=["Social"],
)

# --------------------------
# Posts
# --------------------------

@router.post("/posts", response_model=PostResult, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Create a new post."""
    return post_service.create_post(db, viewer_id_of(viewer), payload.content, payload.image)


@router.get("/feed", response_model=PaginatedPostsResponse)
def get_feed(
    page: Optional[float] = None,
    page_size: Optional[float] = None,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Own and followed authors' posts, newest first."""
    return post_service.get_feed_posts(db, viewer_id_of(viewer), page, page_size)


@router.get("/posts", response_model=PaginatedPostsResponse)
def list_posts(
    search_term: Optional[str] = None,
    categories: Optional[List[str]] = Query(None),
    location: Optional[str] = None,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
    db: Session = Depends(get_db),
):
    """Explore listing over every post."""
    filters = PostFilters(search_term=search_term, categories=categories, location=location)
    return post_service.get_all_posts(db, filters, page, page_size)


@router.delete("/posts/{post_id}", response_model=ActionResult)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Delete a post (author only)."""
    return post_service.delete_post(db, viewer_id_of(viewer), post_id)


@router.post("/posts/{post_id}/like", response_model=LikeResult)
def toggle_like(
    post_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Like the post, or remove the like if it exists."""
    return post_service.toggle_like(db, viewer_id_of(viewer), post_id)


# --------------------------
# Comments
# --------------------------

@router.post("/posts/{post_id}/comments", response_model=CommentResult, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Comment on a post."""
    return post_service.create_comment(db, viewer_id_of(viewer), post_id, payload.content)


@router.delete("/comments/{comment_id}", response_model=ActionResult)
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return post_service.delete_comment(db, viewer_id_of(viewer), comment_id)
