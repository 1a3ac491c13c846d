# social/models.py
from __future__ import annotations

from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from model.base import Base, utcnow
from model.social.enum import NotificationType
from src.id_generator import id_factory


# ---------------------------------------------------------------------------
# Posts: owned exclusively by their author
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    id = Column(String(40), primary_key=True, default=id_factory("post"))
    author_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text)
    image = Column(String(1024))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    author = relationship("User", back_populates="posts")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    notifications = relationship(
        "Notification", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_posts_author", "author_id", "created_at"),
        Index("idx_posts_created", "created_at"),
    )


# ---------------------------------------------------------------------------
# Comments: flat, ordered by creation ascending within a post
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(40), primary_key=True, default=id_factory("comment"))
    content = Column(Text, nullable=False)
    author_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(String(40), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    author = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")
    notifications = relationship(
        "Notification", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_comments_author_post", "author_id", "post_id"),
        Index("idx_comments_post", "post_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Likes: presence of the (user, post) row is the liked state
# ---------------------------------------------------------------------------
class Like(Base):
    __tablename__ = "likes"

    id = Column(String(40), primary_key=True, default=id_factory("like"))
    user_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(String(40), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="likes")
    post = relationship("Post", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),
        Index("idx_likes_post", "post_id"),
    )


# ---------------------------------------------------------------------------
# Notifications: recipient (user), actor (creator), optional post/comment
# ---------------------------------------------------------------------------
class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(40), primary_key=True, default=id_factory("notification"))
    user_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    creator_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(SAEnum(NotificationType, name="notification_type"), nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    post_id = Column(String(40), ForeignKey("posts.id", ondelete="CASCADE"))
    comment_id = Column(String(40), ForeignKey("comments.id", ondelete="CASCADE"))
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", foreign_keys=[user_id], back_populates="notifications")
    creator = relationship("User", foreign_keys=[creator_id], back_populates="notifications_created")
    post = relationship("Post", back_populates="notifications")
    comment = relationship("Comment", back_populates="notifications")

    __table_args__ = (
        Index("idx_notifications_user", "user_id", "created_at"),
    )
