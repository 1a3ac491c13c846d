# src/aggregates.py
"""
Derived aggregates: counts come from relation cardinality and are never
stored; average rating is undefined (None) when there are no ratings.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from model.followers import Follows
from model.review import Review
from model.social.models import Post
from model.user import User


def average_rating(ratings: Sequence[int]) -> Optional[float]:
    """sum/count, unrounded; None for an empty collection."""
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def ratings_by_company(db: Session, company_ids: Iterable[str]) -> Dict[str, List[int]]:
    ids = list(company_ids)
    grouped: Dict[str, List[int]] = defaultdict(list)
    if not ids:
        return grouped
    rows = db.execute(
        select(Review.company_id, Review.rating).where(Review.company_id.in_(ids))
    ).all()
    for company_id, rating in rows:
        grouped[company_id].append(rating)
    return grouped


def review_stats(db: Session, company_id: str) -> Tuple[int, Optional[float]]:
    """Count and average in a single aggregate statement."""
    count, avg = db.execute(
        select(func.count(Review.id), func.avg(Review.rating)).where(Review.company_id == company_id)
    ).one()
    return int(count or 0), (float(avg) if avg is not None else None)


# ------------------------------------------------------------
# Correlated count subqueries, usable in select lists and ORDER BY
# ------------------------------------------------------------
def follower_count_subquery():
    return (
        select(func.count())
        .select_from(Follows)
        .where(Follows.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def review_count_subquery():
    return (
        select(func.count(Review.id))
        .where(Review.company_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def average_rating_subquery():
    return (
        select(func.avg(Review.rating))
        .where(Review.company_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def user_counts(db: Session, user_id: str) -> Dict[str, int]:
    followers = db.scalar(select(func.count()).select_from(Follows).where(Follows.following_id == user_id))
    following = db.scalar(select(func.count()).select_from(Follows).where(Follows.follower_id == user_id))
    posts = db.scalar(select(func.count(Post.id)).where(Post.author_id == user_id))
    return {
        "follower_count": int(followers or 0),
        "following_count": int(following or 0),
        "post_count": int(posts or 0),
    }
