# routes/followers.py
"""
API endpoints for follow/unfollow functionality.
Enables users to follow companies and other users and view follow stats.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.user import CompanySummary, FollowResult, FollowStatsOut
from services import follows as follow_service
from src.route_helpers import get_user_or_404, viewer_id_of

router = APIRouter(prefix="/v1/users", tags=["followers"])


@router.get("/suggestions", response_model=List[CompanySummary])
def who_to_follow(
    limit: int = 3,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Companies the viewer does not follow yet."""
    return follow_service.get_random_company_users(db, viewer_id_of(viewer), limit)


@router.post("/{user_id}/follow", response_model=FollowResult)
def toggle_follow(
    user_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """
    Follow the user, or unfollow if already following.
    """
    return follow_service.toggle_follow(db, viewer_id_of(viewer), user_id)


@router.get("/{user_id}/follow-stats", response_model=FollowStatsOut)
def follow_stats(
    user_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """
    Follower/following counts and whether the viewer follows this user.
    """
    get_user_or_404(db, user_id)
    return follow_service.get_follow_stats(db, viewer_id_of(viewer), user_id)
