# src/route_helpers.py
"""
Helper utilities for FastAPI routes to work with public IDs.
Provides consistent lookup, validation, and error handling across all routes.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from model.user import User
from src.id_generator import PREFIX_MAP, validate_public_id


def viewer_id_of(viewer: Optional[User]) -> Optional[str]:
    """Id passed to services; None for anonymous requests."""
    return viewer.id if viewer is not None else None


def get_user_or_404(db: Session, user_id: str) -> User:
    """
    Get user by public id (e.g., USR-1699564234-A7K9M2).

    Raises:
        HTTPException 400: Invalid user ID format
        HTTPException 404: User not found
    """
    if not validate_public_id(user_id, PREFIX_MAP["user"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format. Expected format: USR-TIMESTAMP-RANDOM",
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        )
    return user
