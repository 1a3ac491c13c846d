"""
config.security
---------------
Viewer resolution for FastAPI routes.

Session tokens are issued by the external identity provider; the `sub`
claim carries the provider's user id, which maps to `User.clerk_id`.

This module defines:
- decode_session_token()  → external auth id or None
- get_current_user()  → requires auth (401)
- get_current_user_optional()  → returns user or None if not logged in
- require_admin()  → feedback inbox access (403)
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from config.db import get_db
from config.settings import ADMIN_USER_IDS, AUTH_JWT_ALG, AUTH_JWT_ISS, AUTH_JWT_KEY
from model.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# TOKEN HELPERS
# ---------------------------------------------------------------------------
def decode_session_token(token: str) -> Optional[str]:
    """
    Decode a provider session token and return its subject.
    Returns None for expired, malformed or wrongly signed tokens.
    """
    try:
        payload = jwt.decode(
            token,
            AUTH_JWT_KEY,
            algorithms=[AUTH_JWT_ALG],
            issuer=AUTH_JWT_ISS or None,
            options={"verify_aud": False},
        )
    except ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except JWTError as e:
        logger.warning("Session token rejected: %s", e)
        return None
    return payload.get("sub") or None


def _load_user(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[User]:
    if credentials is None or not credentials.credentials:
        return None
    clerk_id = decode_session_token(credentials.credentials)
    if not clerk_id:
        return None
    user = db.scalar(select(User).where(User.clerk_id == clerk_id))
    if user is None:
        logger.error("Could not find user with external id %s", clerk_id)
    return user


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------
def get_current_user_optional(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """Return the viewer if the token is valid, otherwise None (no error)."""
    return _load_user(db, credentials)


def get_current_user(user: Optional[User] = Depends(get_current_user_optional)) -> User:
    """Require a valid session and return the viewer."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.clerk_id not in ADMIN_USER_IDS:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin required")
    return user
