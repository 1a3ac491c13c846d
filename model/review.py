# model/review.py
"""
Company reviews. At most one review per (author, company) pair;
resubmitting updates the existing row.
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from model.base import Base, utcnow
from src.id_generator import id_factory

MIN_RATING = 0
MAX_RATING = 5


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(40), primary_key=True, default=id_factory("review"))
    rating = Column(Integer, nullable=False)
    content = Column(Text)
    author_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    company_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    author = relationship("User", foreign_keys=[author_id], back_populates="reviews_written")
    company = relationship("User", foreign_keys=[company_id], back_populates="reviews_received")

    __table_args__ = (
        UniqueConstraint("author_id", "company_id", name="uq_review_author_company"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_review_rating_range"),
        CheckConstraint("author_id != company_id", name="ck_no_self_review"),
        Index("idx_reviews_company_created", "company_id", "created_at"),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, author={self.author_id}, company={self.company_id}, rating={self.rating})>"
