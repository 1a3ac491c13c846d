# services/explore.py
"""
Company explore listing: conjunctive filters, sort keys and pagination,
with per-company follower count, review count and average rating.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, selectinload

from config.settings import EXPLORE_PAGE_SIZE
from model.followers import Follows
from model.user import User
from schema.explore import CompanyCard, CompanyFilters, CompanySort, PaginatedCompaniesResponse
from src.aggregates import (
    average_rating,
    average_rating_subquery,
    follower_count_subquery,
    ratings_by_company,
    review_count_subquery,
)
from src.filters import build_company_conditions
from src.pagination import PageRequest
from src.utils import error_message, random_order

logger = logging.getLogger(__name__)


def _order_by(sort_by: CompanySort) -> list:
    if sort_by == CompanySort.NAME_DESC:
        return [User.name.desc(), User.username.desc(), User.id]
    if sort_by == CompanySort.NEWEST:
        return [User.created_at.desc(), User.id.desc()]
    if sort_by == CompanySort.MOST_FOLLOWED:
        return [follower_count_subquery().desc(), User.name, User.id]
    if sort_by == CompanySort.REVIEWS_DESC:
        return [review_count_subquery().desc(), User.name, User.id]
    if sort_by == CompanySort.RATING_DESC:
        # Unrated companies go last regardless of how the dialect orders NULLs
        avg = average_rating_subquery()
        return [
            case((avg.is_(None), 1), else_=0),
            avg.desc(),
            review_count_subquery().desc(),
            User.name,
            User.id,
        ]
    return [User.name, User.username, User.id]


def _following_ids(db: Session, viewer_id: Optional[str], ids: Sequence[str]) -> set:
    if not viewer_id or not ids:
        return set()
    return set(
        db.scalars(
            select(Follows.following_id).where(
                Follows.follower_id == viewer_id, Follows.following_id.in_(list(ids))
            )
        ).all()
    )


def _to_cards(db: Session, rows: Sequence[Tuple[User, int]], viewer_id: Optional[str]) -> List[CompanyCard]:
    ids = [user.id for user, _ in rows]
    ratings = ratings_by_company(db, ids)
    following = _following_ids(db, viewer_id, ids)

    cards = []
    for user, follower_count in rows:
        company_ratings = ratings.get(user.id, [])
        cards.append(
            CompanyCard(
                id=user.id,
                clerk_id=user.clerk_id,
                name=user.name,
                username=user.username,
                image=user.image,
                background_image=user.background_image,
                location=user.location,
                bio=user.bio,
                categories=list(user.categories),
                follower_count=follower_count or 0,
                review_count=len(company_ratings),
                average_rating=average_rating(company_ratings),
                is_following=user.id in following,
            )
        )
    return cards


def _company_rows(db: Session, conditions, order_by, offset: int = 0, limit: Optional[int] = None):
    stmt = (
        select(User, follower_count_subquery().label("follower_count"))
        .where(*conditions)
        .options(selectinload(User.category_links))
        .order_by(*order_by)
        .offset(offset)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).all()


def get_filtered_companies(
    db: Session,
    viewer_id: Optional[str],
    filters: Optional[CompanyFilters] = None,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
) -> PaginatedCompaniesResponse:
    """
    One page of companies matching every active filter. The viewer's own
    record is never listed.
    """
    filters = filters or CompanyFilters()
    page_req = PageRequest.normalize(page, page_size, EXPLORE_PAGE_SIZE)
    try:
        conditions = build_company_conditions(filters, viewer_id)
        total = db.scalar(select(func.count(User.id)).where(*conditions)) or 0
        rows = _company_rows(
            db, conditions, _order_by(filters.sort_by), page_req.offset, page_req.page_size
        )
        return PaginatedCompaniesResponse(
            success=True,
            companies=_to_cards(db, rows, viewer_id),
            total_count=total,
            current_page=page_req.page,
            page_size=page_req.page_size,
            has_next_page=page_req.has_next(total),
        )
    except Exception as exc:
        logger.exception("Failed to fetch companies")
        return PaginatedCompaniesResponse(
            success=False,
            error=f"Failed to fetch companies: {error_message(exc)}",
            current_page=1,
            page_size=EXPLORE_PAGE_SIZE,
        )


def get_featured_companies(db: Session, limit: int = 6) -> List[CompanyCard]:
    """Most-followed companies."""
    try:
        rows = _company_rows(
            db,
            [User.is_company.is_(True)],
            _order_by(CompanySort.MOST_FOLLOWED),
            limit=max(0, limit),
        )
        return _to_cards(db, rows, None)
    except Exception:
        logger.exception("Failed to load featured companies")
        return []


def get_random_featured_companies(db: Session, viewer_id: Optional[str] = None, limit: int = 5) -> List[CompanyCard]:
    try:
        conditions = [User.is_company.is_(True)]
        if viewer_id:
            conditions.append(User.id != viewer_id)
        rows = _company_rows(db, conditions, [random_order(db)], limit=max(0, limit))
        return _to_cards(db, rows, viewer_id)
    except Exception:
        logger.exception("Failed to load random featured companies")
        return []
