# routes/user.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.scope import ServiceAreaOut
from schema.social import PostListResponse
from schema.user import ProfileResponse, ProfileUpdate, ProfileUpdateResult
from services import posts as post_service
from services import profiles as profile_service
from services.service_area import get_company_service_areas
from src.route_helpers import get_user_or_404, viewer_id_of

router = APIRouter(prefix="/v1/users", tags=["Users"])


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
@router.patch("/me", response_model=ProfileUpdateResult)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Partial update of the viewer's own profile."""
    return profile_service.update_profile(db, viewer_id_of(viewer), payload)


@router.get("/{username}", response_model=ProfileResponse)
def get_profile(
    username: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return profile_service.get_profile_by_username(db, username, viewer_id_of(viewer))


# ---------------------------------------------------------------------------
# Profile tabs
# ---------------------------------------------------------------------------
@router.get("/{user_id}/posts", response_model=PostListResponse)
def user_posts(user_id: str, db: Session = Depends(get_db)):
    get_user_or_404(db, user_id)
    return post_service.get_user_posts(db, user_id)


@router.get("/{user_id}/liked-posts", response_model=PostListResponse)
def user_liked_posts(user_id: str, db: Session = Depends(get_db)):
    get_user_or_404(db, user_id)
    return post_service.get_user_liked_posts(db, user_id)


@router.get("/{user_id}/service-areas", response_model=List[ServiceAreaOut])
def service_areas(user_id: str, db: Session = Depends(get_db)):
    get_user_or_404(db, user_id)
    return get_company_service_areas(db, user_id)
