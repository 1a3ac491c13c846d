# routes/reviews.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.common import ActionResult
from schema.review import PaginatedReviewsResponse, ReviewCreate
from services import reviews as review_service
from src.route_helpers import viewer_id_of

router = APIRouter(prefix="/v1/reviews", tags=["Reviews"])


@router.post("", response_model=ActionResult)
def submit_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Create the viewer's review of a company or replace the existing one."""
    return review_service.create_review(
        db, viewer_id_of(viewer), payload.company_id, payload.rating, payload.content
    )


@router.get("/company/{company_id}", response_model=PaginatedReviewsResponse)
def company_reviews(
    company_id: str,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return review_service.get_company_reviews_and_stats(
        db, viewer_id_of(viewer), company_id, page, page_size
    )
