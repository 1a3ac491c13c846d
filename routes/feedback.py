# routes/feedback.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional, require_admin
from model.user import User
from schema.common import ActionResult
from schema.feedback import EnrollmentIn, FeedbackIn, FeedbackListResponse, FeedbackResponse
from services import enrollment as enrollment_service
from services import feedback as feedback_service
from src.route_helpers import viewer_id_of

router = APIRouter(prefix="/v1", tags=["Feedback"])


@router.post("/feedback", response_model=FeedbackResponse)
def submit_feedback(
    payload: FeedbackIn,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return feedback_service.submit_feedback(db, viewer_id_of(viewer), payload.content, payload.email)


@router.get("/feedback", response_model=FeedbackListResponse)
def list_feedback(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Feedback inbox, newest first (admins only)."""
    return feedback_service.get_all_feedback(db)


@router.post("/enrollment", response_model=ActionResult)
def submit_enrollment(payload: EnrollmentIn, db: Session = Depends(get_db)):
    """Company enrollment request from the public form."""
    return enrollment_service.submit_enrollment(db, payload)
