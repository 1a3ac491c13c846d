# services/feedback.py
"""
Site feedback inbox. Messages are user-facing Spanish strings.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from model.feedback import Feedback
from schema.feedback import FeedbackListItem, FeedbackListResponse, FeedbackOut, FeedbackResponse
from src.utils import FEEDBACK_EMAIL_RE, clean_text

logger = logging.getLogger(__name__)

EMPTY_CONTENT = "El contenido del comentario no puede estar vacío"
INVALID_EMAIL = "El formato del correo electrónico no es válido"
SUBMIT_FAILED = "Error al enviar los comentarios. Por favor, inténtalo de nuevo."
FETCH_FAILED = "Error al obtener los comentarios"


def submit_feedback(
    db: Session,
    viewer_id: Optional[str],
    content: Optional[str],
    email: Optional[str] = None,
) -> FeedbackResponse:
    """Anonymous feedback is accepted; the author is recorded when known."""
    content = clean_text(content)
    if not content:
        return FeedbackResponse(success=False, error=EMPTY_CONTENT)

    email = clean_text(email)
    if email and not FEEDBACK_EMAIL_RE.match(email):
        return FeedbackResponse(success=False, error=INVALID_EMAIL)

    try:
        feedback = Feedback(content=content, email=email, user_id=viewer_id or None)
        db.add(feedback)
        db.commit()
        logger.info("Feedback %s received (user=%s)", feedback.id, viewer_id)
        return FeedbackResponse(success=True, feedback=FeedbackOut.model_validate(feedback))
    except Exception:
        db.rollback()
        logger.exception("Failed to store feedback")
        return FeedbackResponse(success=False, error=SUBMIT_FAILED)


def get_all_feedback(db: Session) -> FeedbackListResponse:
    try:
        rows = db.scalars(
            select(Feedback)
            .options(selectinload(Feedback.user))
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        ).all()
        return FeedbackListResponse(
            success=True, feedbacks=[FeedbackListItem.model_validate(f) for f in rows]
        )
    except Exception:
        logger.exception("Failed to list feedback")
        return FeedbackListResponse(success=False, error=FETCH_FAILED)
