# services/profiles.py
"""
Profile reads and owner-only profile updates.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from model.user import MAX_COMPANY_CATEGORIES, User
from schema.user import ProfileOut, ProfileResponse, ProfileUpdate, ProfileUpdateResult
from services.follows import is_following
from src.aggregates import review_stats, user_counts
from src.utils import NOT_AUTHENTICATED, clean_text

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "bio", "location", "website", "image", "background_image")


def build_profile(db: Session, user: User, viewer_id: Optional[str] = None) -> ProfileOut:
    counts = user_counts(db, user.id)
    review_count, avg = review_stats(db, user.id) if user.is_company else (0, None)
    return ProfileOut(
        id=user.id,
        clerk_id=user.clerk_id,
        username=user.username,
        name=user.name,
        bio=user.bio,
        location=user.location,
        website=user.website,
        image=user.image,
        background_image=user.background_image,
        is_company=bool(user.is_company),
        categories=list(user.categories),
        profile_views=user.profile_views or 0,
        created_at=user.created_at,
        review_count=review_count,
        average_rating=avg,
        is_following=is_following(db, viewer_id, user.id),
        **counts,
    )


def get_profile_by_username(db: Session, username: str, viewer_id: Optional[str] = None) -> ProfileResponse:
    """
    Load a profile by username. Every view by someone other than the owner
    (anonymous visitors included) bumps `profile_views`.
    """
    try:
        user = db.scalar(
            select(User)
            .where(User.username == username)
            .options(selectinload(User.category_links))
        )
        if user is None:
            return ProfileResponse(success=False, error="Profile not found")

        if viewer_id != user.id:
            db.execute(
                update(User)
                .where(User.id == user.id)
                .values(profile_views=User.profile_views + 1)
            )
            db.commit()
            db.refresh(user, ["profile_views"])

        return ProfileResponse(success=True, profile=build_profile(db, user, viewer_id))
    except Exception:
        db.rollback()
        logger.exception("Failed to load profile %s", username)
        return ProfileResponse(success=False, error="Failed to load profile")


def update_profile(db: Session, viewer_id: Optional[str], data: ProfileUpdate) -> ProfileUpdateResult:
    """
    Patch the viewer's own profile. Only fields present in the payload are
    written; categories are deduplicated and companies may keep at most
    MAX_COMPANY_CATEGORIES of them.
    """
    if not viewer_id:
        return ProfileUpdateResult(success=False, error=NOT_AUTHENTICATED)

    fields = data.model_dump(exclude_unset=True)

    try:
        user = db.get(User, viewer_id)
        if user is None:
            return ProfileUpdateResult(success=False, error="User not found")

        categories = fields.get("categories")
        if categories is not None:
            categories = list(dict.fromkeys(c.strip() for c in categories if c and c.strip()))

        becomes_company = fields.get("is_company")
        if becomes_company is None:
            becomes_company = bool(user.is_company)
        resulting = categories if categories is not None else list(user.categories)
        if becomes_company and len(resulting) > MAX_COMPANY_CATEGORIES:
            return ProfileUpdateResult(
                success=False,
                error=f"Companies can select at most {MAX_COMPANY_CATEGORIES} categories",
            )

        for key in EDITABLE_FIELDS:
            if key in fields:
                setattr(user, key, clean_text(fields[key]))
        if fields.get("is_company") is not None:
            user.is_company = fields["is_company"]
        if categories is not None:
            user.replace_categories(categories)

        db.commit()
        logger.info("Profile %s updated (%s)", viewer_id, ", ".join(sorted(fields)) or "no fields")
        return ProfileUpdateResult(success=True, profile=build_profile(db, user, viewer_id))
    except Exception:
        db.rollback()
        logger.exception("Failed to update profile %s", viewer_id)
        return ProfileUpdateResult(success=False, error="Failed to update profile")
