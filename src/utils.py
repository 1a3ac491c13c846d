# src/utils.py
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from sqlalchemy import func

from config.settings import AUTH_JWT_ALG, AUTH_JWT_ISS, AUTH_JWT_KEY

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "User not authenticated."

# Feedback uses the stricter pattern, enrollment the permissive one
FEEDBACK_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ENROLLMENT_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def error_message(exc: BaseException, fallback: str = "An unknown error occurred.") -> str:
    text = str(exc).strip()
    return text or fallback


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip whitespace; empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def make_session_token(subject: str, ttl_minutes: int = 60, extra: Optional[Dict[str, Any]] = None) -> str:
    """Issue a session token in the identity provider's format (dev and tests).
    Production tokens are minted by the provider itself.
    """
    if not subject:
        raise ValueError("subject is required")
    issued_at = _now_utc()
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(minutes=ttl_minutes)).timestamp()),
    }
    if AUTH_JWT_ISS:
        payload["iss"] = AUTH_JWT_ISS
    if extra:
        payload.update(extra)
    return jwt.encode(payload, AUTH_JWT_KEY, algorithm=AUTH_JWT_ALG)


def random_order(db):
    """ORDER BY expression for a random sample on the session's dialect."""
    if db.get_bind().dialect.name == "mysql":
        return func.rand()
    return func.random()
