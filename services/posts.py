# services/posts.py
"""
Post actions: home feed, explore listing, profile tabs, create/delete,
likes and comments.

Every function returns an envelope; failures are logged and reported
through `success=False` instead of raising.
"""

import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from config.settings import EXPLORE_POSTS_PAGE_SIZE, FEED_PAGE_SIZE
from model.followers import Follows
from model.social.enum import NotificationType
from model.social.models import Comment, Like, Notification, Post
from schema.common import ActionResult
from schema.social import (
    AuthorSummary,
    CommentOut,
    CommentResult,
    LikeOut,
    LikeResult,
    PaginatedPostsResponse,
    PostFilters,
    PostListResponse,
    PostOut,
    PostResult,
)
from src.filters import build_post_conditions
from src.pagination import PageRequest
from src.utils import NOT_AUTHENTICATED, clean_text

logger = logging.getLogger(__name__)

ALREADY_TOGGLED = "You may have already done this. Refresh and try again."


# ------------------------------------------------------------
# Loading and projection
# ------------------------------------------------------------
def _post_options():
    return (
        selectinload(Post.author),
        selectinload(Post.comments).selectinload(Comment.author),
        selectinload(Post.likes),
    )


def post_to_out(post: Post) -> PostOut:
    return PostOut(
        id=post.id,
        content=post.content,
        image=post.image,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=AuthorSummary.model_validate(post.author),
        comments=[CommentOut.model_validate(c) for c in post.comments],
        likes=[LikeOut(user_id=like.user_id) for like in post.likes],
        like_count=len(post.likes),
        comment_count=len(post.comments),
    )


def _page_of_posts(db: Session, conditions, page_req: PageRequest) -> PaginatedPostsResponse:
    total = db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
    posts = db.scalars(
        select(Post)
        .where(*conditions)
        .options(*_post_options())
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(page_req.offset)
        .limit(page_req.page_size)
    ).all()
    return PaginatedPostsResponse(
        success=True,
        posts=[post_to_out(p) for p in posts],
        total_count=total,
        current_page=page_req.page,
        page_size=page_req.page_size,
        has_next_page=page_req.has_next(total),
    )


# ------------------------------------------------------------
# Listings
# ------------------------------------------------------------
def get_feed_posts(
    db: Session,
    viewer_id: Optional[str],
    page: Optional[float] = None,
    page_size: Optional[float] = None,
) -> PaginatedPostsResponse:
    """Posts by the viewer and by everyone the viewer follows, newest first."""
    page_req = PageRequest.normalize(page, page_size, FEED_PAGE_SIZE)
    if not viewer_id:
        # Anonymous visitors get an empty page, not an error
        return PaginatedPostsResponse(
            success=True, current_page=page_req.page, page_size=page_req.page_size
        )

    try:
        following_ids = db.scalars(
            select(Follows.following_id).where(Follows.follower_id == viewer_id)
        ).all()
        condition = or_(Post.author_id == viewer_id, Post.author_id.in_(following_ids))
        return _page_of_posts(db, [condition], page_req)
    except Exception:
        logger.exception("Failed to load feed for %s", viewer_id)
        return PaginatedPostsResponse(
            success=False,
            error="Failed to load posts.",
            current_page=1,
            page_size=FEED_PAGE_SIZE,
        )


def get_all_posts(
    db: Session,
    filters: Optional[PostFilters] = None,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
) -> PaginatedPostsResponse:
    """Explore listing over every post; the viewer's own posts are included."""
    page_req = PageRequest.normalize(page, page_size, EXPLORE_POSTS_PAGE_SIZE)
    try:
        return _page_of_posts(db, build_post_conditions(filters), page_req)
    except Exception:
        logger.exception("Failed to load explore posts")
        return PaginatedPostsResponse(
            success=False,
            error="Failed to load posts.",
            current_page=1,
            page_size=EXPLORE_POSTS_PAGE_SIZE,
        )


def get_user_posts(db: Session, user_id: str) -> PostListResponse:
    try:
        posts = db.scalars(
            select(Post)
            .where(Post.author_id == user_id)
            .options(*_post_options())
            .order_by(Post.created_at.desc(), Post.id.desc())
        ).all()
        return PostListResponse(success=True, posts=[post_to_out(p) for p in posts])
    except Exception:
        logger.exception("Failed to load posts of %s", user_id)
        return PostListResponse(success=False, error="Failed to fetch user posts")


def get_user_liked_posts(db: Session, user_id: str) -> PostListResponse:
    try:
        posts = db.scalars(
            select(Post)
            .where(Post.likes.any(Like.user_id == user_id))
            .options(*_post_options())
            .order_by(Post.created_at.desc(), Post.id.desc())
        ).all()
        return PostListResponse(success=True, posts=[post_to_out(p) for p in posts])
    except Exception:
        logger.exception("Failed to load liked posts of %s", user_id)
        return PostListResponse(success=False, error="Failed to fetch liked posts")


# ------------------------------------------------------------
# Mutations
# ------------------------------------------------------------
def create_post(
    db: Session,
    viewer_id: Optional[str],
    content: Optional[str],
    image: Optional[str] = None,
) -> PostResult:
    if not viewer_id:
        return PostResult(success=False, error=NOT_AUTHENTICATED)

    content = clean_text(content)
    image = clean_text(image)
    if not content and not image:
        return PostResult(success=False, error="Post must have content or an image")

    try:
        post = Post(author_id=viewer_id, content=content, image=image)
        db.add(post)
        db.commit()
        logger.info("Post %s created by %s", post.id, viewer_id)
        return PostResult(success=True, post=post_to_out(post))
    except Exception:
        db.rollback()
        logger.exception("Failed to create post for %s", viewer_id)
        return PostResult(success=False, error="Failed to create post")


def toggle_like(db: Session, viewer_id: Optional[str], post_id: str) -> LikeResult:
    """
    Like or unlike a post. A new like on someone else's post creates a LIKE
    notification in the same transaction.
    """
    if not viewer_id:
        return LikeResult(success=False, error=NOT_AUTHENTICATED)

    try:
        post = db.get(Post, post_id)
        if post is None:
            return LikeResult(success=False, error="Post not found")

        existing = db.scalar(
            select(Like).where(Like.user_id == viewer_id, Like.post_id == post_id)
        )
        if existing is not None:
            db.delete(existing)
            liked = False
        else:
            db.add(Like(user_id=viewer_id, post_id=post_id))
            if post.author_id != viewer_id:
                db.add(
                    Notification(
                        type=NotificationType.LIKE,
                        user_id=post.author_id,
                        creator_id=viewer_id,
                        post_id=post_id,
                    )
                )
            liked = True
        db.commit()

        like_count = db.scalar(select(func.count(Like.id)).where(Like.post_id == post_id)) or 0
        return LikeResult(success=True, liked=liked, like_count=like_count)
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent like on %s by %s", post_id, viewer_id)
        return LikeResult(success=False, error=ALREADY_TOGGLED)
    except Exception:
        db.rollback()
        logger.exception("Failed to toggle like on %s", post_id)
        return LikeResult(success=False, error="Failed to toggle like")


def create_comment(
    db: Session, viewer_id: Optional[str], post_id: str, content: Optional[str]
) -> CommentResult:
    if not viewer_id:
        return CommentResult(success=False, error=NOT_AUTHENTICATED)

    content = clean_text(content)
    if not content:
        return CommentResult(success=False, error="Comment content cannot be empty")

    try:
        post = db.get(Post, post_id)
        if post is None:
            return CommentResult(success=False, error="Post not found")

        comment = Comment(content=content, author_id=viewer_id, post_id=post_id)
        db.add(comment)
        # Assigns the comment id before the notification references it
        db.flush()
        if post.author_id != viewer_id:
            db.add(
                Notification(
                    type=NotificationType.COMMENT,
                    user_id=post.author_id,
                    creator_id=viewer_id,
                    post_id=post_id,
                    comment_id=comment.id,
                )
            )
        db.commit()
        return CommentResult(success=True, comment=CommentOut.model_validate(comment))
    except Exception:
        db.rollback()
        logger.exception("Failed to create comment on %s", post_id)
        return CommentResult(success=False, error="Failed to create comment")


def delete_post(db: Session, viewer_id: Optional[str], post_id: str) -> ActionResult:
    """Only the author may delete; comments, likes and notifications cascade."""
    if not viewer_id:
        return ActionResult(success=False, error=NOT_AUTHENTICATED)

    try:
        post = db.get(Post, post_id)
        if post is None:
            return ActionResult(success=False, error="Post not found")
        if post.author_id != viewer_id:
            return ActionResult(success=False, error="Unauthorized to delete this post")

        db.delete(post)
        db.commit()
        logger.info("Post %s deleted by %s", post_id, viewer_id)
        return ActionResult(success=True)
    except Exception:
        db.rollback()
        logger.exception("Failed to delete post %s", post_id)
        return ActionResult(success=False, error="Failed to delete post")


def delete_comment(db: Session, viewer_id: Optional[str], comment_id: str) -> ActionResult:
    if not viewer_id:
        return ActionResult(success=False, error=NOT_AUTHENTICATED)

    try:
        comment = db.get(Comment, comment_id)
        if comment is None:
            return ActionResult(success=False, error="Comment not found")
        if comment.author_id != viewer_id:
            return ActionResult(success=False, error="Unauthorized to delete this comment")

        db.delete(comment)
        db.commit()
        return ActionResult(success=True)
    except Exception:
        db.rollback()
        logger.exception("Failed to delete comment %s", comment_id)
        return ActionResult(success=False, error="Failed to delete comment")
