# model/followers.py
"""
Follows model for tracking user-to-user following relationships.
Presence of the row is the follow state; counts are derived from it.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, PrimaryKeyConstraint, Index
from sqlalchemy.orm import relationship

from model.base import Base, utcnow


class Follows(Base):
    """
    Directed follow edge.

    Example:
        - User A follows company B
          -> follower_id=A, following_id=B
    """
    __tablename__ = "follows"

    follower_id = Column(
        String(40),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who is following",
    )
    following_id = Column(
        String(40),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User being followed",
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following")
    following = relationship("User", foreign_keys=[following_id], back_populates="followers")

    __table_args__ = (
        # Composite PK: a user can only follow another user once
        PrimaryKeyConstraint("follower_id", "following_id", name="pk_follows"),
        CheckConstraint("follower_id != following_id", name="ck_no_self_follow"),
        Index("idx_follows_following", "following_id", "created_at"),
    )

    def __repr__(self):
        return f"<Follows(follower={self.follower_id}, following={self.following_id})>"
