# services/follows.py
"""
Follow/unfollow and follow statistics.
Presence of a Follows row is the follow state; counts are derived from it.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from model.followers import Follows
from model.social.enum import NotificationType
from model.social.models import Notification
from model.user import User
from schema.user import CompanySummary, FollowResult, FollowStatsOut
from src.aggregates import follower_count_subquery, user_counts
from src.utils import NOT_AUTHENTICATED, random_order

logger = logging.getLogger(__name__)


def is_following(db: Session, viewer_id: Optional[str], user_id: str) -> bool:
    if not viewer_id or viewer_id == user_id:
        return False
    return db.get(Follows, (viewer_id, user_id)) is not None


def toggle_follow(db: Session, viewer_id: Optional[str], target_user_id: str) -> FollowResult:
    """
    Follow `target_user_id` if the viewer does not follow them yet, otherwise
    unfollow. A new follow creates a FOLLOW notification in the same
    transaction.
    """
    if not viewer_id:
        return FollowResult(success=False, error=NOT_AUTHENTICATED)
    if viewer_id == target_user_id:
        return FollowResult(success=False, error="You cannot follow yourself")

    try:
        if db.get(User, target_user_id) is None:
            return FollowResult(success=False, error="User not found")

        existing = db.get(Follows, (viewer_id, target_user_id))
        if existing is not None:
            db.delete(existing)
            now_following = False
        else:
            db.add(Follows(follower_id=viewer_id, following_id=target_user_id))
            db.add(
                Notification(
                    type=NotificationType.FOLLOW,
                    user_id=target_user_id,
                    creator_id=viewer_id,
                )
            )
            now_following = True
        db.commit()

        logger.info(
            "%s %s %s", viewer_id, "followed" if now_following else "unfollowed", target_user_id
        )
        return FollowResult(success=True, is_following=now_following)
    except IntegrityError:
        db.rollback()
        logger.warning("Follow race between %s and %s", viewer_id, target_user_id)
        return FollowResult(success=False, error="Error toggling follow")
    except Exception:
        db.rollback()
        logger.exception("Error toggling follow %s -> %s", viewer_id, target_user_id)
        return FollowResult(success=False, error="Error toggling follow")


def get_follow_stats(db: Session, viewer_id: Optional[str], user_id: str) -> FollowStatsOut:
    counts = user_counts(db, user_id)
    return FollowStatsOut(
        user_id=user_id,
        follower_count=counts["follower_count"],
        following_count=counts["following_count"],
        is_following=is_following(db, viewer_id, user_id),
    )


def get_random_company_users(db: Session, viewer_id: Optional[str], limit: int = 3) -> List[CompanySummary]:
    """
    Follow suggestions: companies other than the viewer that the viewer does
    not already follow. Anonymous viewers get no suggestions.
    """
    if not viewer_id:
        return []

    try:
        followers = follower_count_subquery().label("follower_count")
        rows = db.execute(
            select(User, followers)
            .where(
                User.is_company.is_(True),
                User.id != viewer_id,
                ~User.followers.any(Follows.follower_id == viewer_id),
            )
            .order_by(random_order(db))
            .limit(max(0, limit))
        ).all()
        return [
            CompanySummary(
                id=user.id,
                name=user.name,
                username=user.username,
                image=user.image,
                follower_count=count or 0,
            )
            for user, count in rows
        ]
    except Exception:
        logger.exception("Failed to load follow suggestions for %s", viewer_id)
        return []
