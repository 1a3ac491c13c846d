"""
Reviews: rating validation before any write, upsert per (author, company),
self-review rejection and paginated stats.
"""
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from model.review import Review
from services.reviews import INVALID_RATING, create_review, get_company_reviews_and_stats, is_valid_rating
from src.aggregates import average_rating


def _review_count(db):
    return db.scalar(select(func.count(Review.id)))


class TestRatingValidation:

    @pytest.mark.parametrize("rating", [-1, 6, 2.5, True, None, "4", float("nan")])
    def test_rejected(self, rating):
        assert not is_valid_rating(rating)

    @pytest.mark.parametrize("rating", [0, 1, 2, 3, 4, 5, 4.0])
    def test_accepted(self, rating):
        assert is_valid_rating(rating)


class TestCreateReview:

    @pytest.mark.parametrize("rating", [-1, 6, 2.5])
    def test_invalid_rating_writes_nothing(self, db_session, make_user, make_company, rating):
        author = make_user()
        company = make_company()
        result = create_review(db_session, author.id, company.id, rating, "meh")
        assert result.success is False
        assert result.error == INVALID_RATING
        assert _review_count(db_session) == 0

    def test_second_submission_updates(self, db_session, make_user, make_company):
        author = make_user()
        company = make_company()
        assert create_review(db_session, author.id, company.id, 2, "ok").success
        assert create_review(db_session, author.id, company.id, 5, "great now").success

        reviews = db_session.scalars(select(Review)).all()
        assert len(reviews) == 1
        assert reviews[0].rating == 5
        assert reviews[0].content == "great now"

    def test_identical_resubmission_refreshes_timestamp(self, db_session, make_user, make_company):
        author = make_user()
        company = make_company()
        create_review(db_session, author.id, company.id, 4, "ok")
        review = db_session.scalar(select(Review))
        stale = review.updated_at - timedelta(days=1)
        review.updated_at = stale
        db_session.commit()

        assert create_review(db_session, author.id, company.id, 4, "ok").success
        db_session.expire_all()
        assert db_session.scalar(select(Review)).updated_at > stale

    def test_self_review_rejected(self, db_session, make_company):
        company = make_company()
        result = create_review(db_session, company.id, company.id, 5)
        assert result.success is False
        assert result.error == "You cannot review your own profile."
        assert _review_count(db_session) == 0

    def test_anonymous_rejected(self, db_session, make_company):
        company = make_company()
        assert create_review(db_session, None, company.id, 5).success is False

    def test_only_companies_can_be_reviewed(self, db_session, make_user):
        author, person = make_user(), make_user()
        assert create_review(db_session, author.id, person.id, 3).success is False


class TestReviewStats:

    def test_average_of_three(self, db_session, make_user, make_company):
        company = make_company()
        authors = [make_user() for _ in range(3)]
        for author, rating in zip(authors, [5, 3, 4]):
            create_review(db_session, author.id, company.id, rating)

        # Spread creation times so the ordering is deterministic
        reviews = db_session.scalars(select(Review).order_by(Review.rating)).all()
        base = reviews[0].created_at
        for offset, review in enumerate(sorted(reviews, key=lambda r: r.author_id)):
            review.created_at = base + timedelta(minutes=offset)
        db_session.commit()

        result = get_company_reviews_and_stats(db_session, authors[0].id, company.id)
        assert result.success
        assert result.total_count == 3
        assert result.average_rating == pytest.approx(4.0)
        assert result.user_has_reviewed is True
        assert result.has_next_page is False
        created = [r.created_at for r in result.reviews]
        assert created == sorted(created, reverse=True)

    def test_no_reviews_means_null_average(self, db_session, make_company, make_user):
        company = make_company()
        result = get_company_reviews_and_stats(db_session, make_user().id, company.id)
        assert result.success
        assert result.total_count == 0
        assert result.average_rating is None
        assert result.user_has_reviewed is False

    def test_pagination(self, db_session, make_user, make_company):
        company = make_company()
        for _ in range(3):
            create_review(db_session, make_user().id, company.id, 4)

        page = get_company_reviews_and_stats(db_session, None, company.id, page=1, page_size=2)
        assert len(page.reviews) == 2
        assert page.has_next_page is True
        last = get_company_reviews_and_stats(db_session, None, company.id, page=2, page_size=2)
        assert len(last.reviews) == 1
        assert last.has_next_page is False

    def test_average_helper(self):
        assert average_rating([]) is None
        assert average_rating([0]) == 0
        assert average_rating([5, 4]) == 4.5
