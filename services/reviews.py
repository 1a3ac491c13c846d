# services/reviews.py
"""
Company reviews: one review per (author, company); resubmitting replaces
the rating and text of the existing review.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from config.settings import REVIEW_PAGE_SIZE
from model.base import utcnow
from model.review import MAX_RATING, MIN_RATING, Review
from model.user import User
from schema.common import ActionResult
from schema.review import PaginatedReviewsResponse, ReviewOut
from src.aggregates import review_stats
from src.pagination import PageRequest
from src.utils import NOT_AUTHENTICATED, clean_text, error_message

logger = logging.getLogger(__name__)

INVALID_RATING = f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}."


def is_valid_rating(rating) -> bool:
    """Integral value in [MIN_RATING, MAX_RATING]; 4.0 counts, 2.5 does not."""
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        return False
    if isinstance(rating, float) and not rating.is_integer():
        return False
    return MIN_RATING <= rating <= MAX_RATING


def create_review(
    db: Session,
    viewer_id: Optional[str],
    company_id: str,
    rating,
    content: Optional[str] = None,
) -> ActionResult:
    if not viewer_id:
        return ActionResult(success=False, error=NOT_AUTHENTICATED)
    if viewer_id == company_id:
        return ActionResult(success=False, error="You cannot review your own profile.")
    if not is_valid_rating(rating):
        return ActionResult(success=False, error=INVALID_RATING)

    try:
        company = db.get(User, company_id)
        if company is None or not company.is_company:
            return ActionResult(success=False, error="Company not found.")

        review = db.scalar(
            select(Review).where(Review.author_id == viewer_id, Review.company_id == company_id)
        )
        if review is None:
            review = Review(author_id=viewer_id, company_id=company_id)
            db.add(review)
        else:
            review.updated_at = utcnow()
        review.rating = int(rating)
        review.content = clean_text(content)
        db.commit()

        logger.info("Review %s by %s on %s (rating=%s)", review.id, viewer_id, company_id, review.rating)
        return ActionResult(success=True)
    except IntegrityError:
        db.rollback()
        logger.warning("Duplicate review insert by %s on %s", viewer_id, company_id)
        return ActionResult(success=False, error="You seem to have already reviewed this company recently.")
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to submit review on %s", company_id)
        return ActionResult(success=False, error=f"Failed to submit review: {error_message(exc)}")


def get_company_reviews_and_stats(
    db: Session,
    viewer_id: Optional[str],
    company_id: str,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
) -> PaginatedReviewsResponse:
    """
    One page of a company's reviews (newest first) with the company-wide
    average and whether the viewer has already reviewed it.
    """
    page_req = PageRequest.normalize(page, page_size, REVIEW_PAGE_SIZE)
    try:
        total, avg = review_stats(db, company_id)
        reviews = db.scalars(
            select(Review)
            .where(Review.company_id == company_id)
            .options(selectinload(Review.author))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(page_req.offset)
            .limit(page_req.page_size)
        ).all()

        user_has_reviewed = False
        if viewer_id:
            user_has_reviewed = bool(
                db.scalar(
                    select(func.count(Review.id)).where(
                        Review.company_id == company_id, Review.author_id == viewer_id
                    )
                )
            )

        return PaginatedReviewsResponse(
            success=True,
            reviews=[ReviewOut.model_validate(r) for r in reviews],
            average_rating=avg,
            user_has_reviewed=user_has_reviewed,
            total_count=total,
            current_page=page_req.page,
            page_size=page_req.page_size,
            has_next_page=page_req.has_next(total),
        )
    except Exception as exc:
        logger.exception("Failed to load reviews of %s", company_id)
        return PaginatedReviewsResponse(
            success=False,
            error=f"Failed to load reviews: {error_message(exc)}",
            current_page=1,
            page_size=REVIEW_PAGE_SIZE,
        )
