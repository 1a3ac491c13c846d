# services/identity_sync.py
"""
Mirror identity-provider user events into the local users table.

Handlers raise on persistence failures; the webhook route turns that into
an HTTP 500 so the provider retries the delivery.
"""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from model.user import User

logger = logging.getLogger(__name__)

FALLBACK_USERNAME = "user"
_USERNAME_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


def primary_email(payload: Dict[str, Any]) -> Optional[str]:
    """The address flagged as primary, else the first one listed."""
    addresses = payload.get("email_addresses") or []
    primary_id = payload.get("primary_email_address_id")
    for entry in addresses:
        if primary_id and entry.get("id") == primary_id:
            return entry.get("email_address")
    if addresses:
        return addresses[0].get("email_address")
    return None


def username_from_email(email: Optional[str]) -> str:
    local = (email or "").split("@")[0]
    local = _USERNAME_CHARS.sub("", local)
    return local or FALLBACK_USERNAME


def _display_name(payload: Dict[str, Any]) -> Optional[str]:
    parts = [payload.get("first_name"), payload.get("last_name")]
    name = " ".join(p.strip() for p in parts if p and p.strip())
    return name or None


def _username_taken(db: Session, username: str, exclude_user_id: Optional[str] = None) -> bool:
    stmt = select(User.id).where(User.username == username)
    if exclude_user_id:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.scalar(stmt.limit(1)) is not None


def unique_username(db: Session, base: str, exclude_user_id: Optional[str] = None) -> str:
    """`base`, or `base` with the smallest numeric suffix that is free."""
    candidate = base
    suffix = 1
    while _username_taken(db, candidate, exclude_user_id):
        candidate = f"{base}{suffix}"
        suffix += 1
    return candidate


def handle_user_created(db: Session, payload: Dict[str, Any]) -> User:
    clerk_id = payload["id"]
    existing = db.scalar(select(User).where(User.clerk_id == clerk_id))
    if existing is not None:
        # Redelivered event
        logger.info("User %s already exists, applying as update", clerk_id)
        return handle_user_updated(db, payload)

    email = primary_email(payload)
    base = payload.get("username") or username_from_email(email)
    user = User(
        clerk_id=clerk_id,
        email=email or f"{clerk_id}@users.invalid",
        username=unique_username(db, base),
        name=_display_name(payload),
        image=payload.get("image_url"),
    )
    db.add(user)
    db.commit()
    logger.info("Created user %s (%s) from identity event", user.id, user.username)
    return user


def handle_user_updated(db: Session, payload: Dict[str, Any]) -> User:
    """Patch email, username and avatar; unknown users are created."""
    clerk_id = payload["id"]
    user = db.scalar(select(User).where(User.clerk_id == clerk_id))
    if user is None:
        logger.warning("User %s not found during update, creating it", clerk_id)
        return handle_user_created(db, payload)

    email = primary_email(payload)
    if email:
        user.email = email
    requested = payload.get("username")
    if requested and requested != user.username:
        if _username_taken(db, requested, exclude_user_id=user.id):
            logger.warning("Username %s is taken, keeping %s for %s", requested, user.username, clerk_id)
        else:
            user.username = requested
    if "image_url" in payload:
        user.image = payload.get("image_url")

    db.commit()
    logger.info("Updated user %s from identity event", user.id)
    return user


def handle_user_deleted(db: Session, payload: Dict[str, Any]) -> bool:
    """Delete the local user. Returns False when there was nothing to delete."""
    clerk_id = payload.get("id")
    user = db.scalar(select(User).where(User.clerk_id == clerk_id)) if clerk_id else None
    if user is None:
        logger.warning("User %s not found during deletion", clerk_id)
        return False

    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (%s)", user.id, clerk_id)
    return True
