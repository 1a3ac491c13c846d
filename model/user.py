# model/user.py
from sqlalchemy import (
    Column, String, Text, Boolean, Integer, DateTime,
    ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship

from model.base import Base, utcnow
from src.id_generator import id_factory

# Companies may declare at most this many categories
MAX_COMPANY_CATEGORIES = 5


class User(Base):
    __tablename__ = "users"

    id = Column(String(40), primary_key=True, default=id_factory("user"))
    clerk_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(120), unique=True, nullable=False)
    name = Column(String(255))
    bio = Column(Text)
    location = Column(String(255))
    website = Column(String(512))
    image = Column(String(1024))
    background_image = Column(String(1024))
    is_company = Column(Boolean, nullable=False, default=False)
    profile_views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_users_is_company_name", "is_company", "name"),
    )

    category_links = relationship(
        "UserCategory",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserCategory.name",
    )
    categories = association_proxy(
        "category_links", "name", creator=lambda name: UserCategory(name=name)
    )

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    # Follow edges in both directions
    following = relationship(
        "Follows",
        foreign_keys="Follows.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    followers = relationship(
        "Follows",
        foreign_keys="Follows.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    reviews_written = relationship(
        "Review", foreign_keys="Review.author_id", back_populates="author",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    reviews_received = relationship(
        "Review", foreign_keys="Review.company_id", back_populates="company",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    notifications = relationship(
        "Notification", foreign_keys="Notification.user_id", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    notifications_created = relationship(
        "Notification", foreign_keys="Notification.creator_id", back_populates="creator",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    service_areas = relationship(
        "CompanyServiceArea", back_populates="company",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    feedback = relationship("Feedback", back_populates="user")

    def replace_categories(self, names):
        """
        Sync category rows with `names` in place. Rows kept across the update
        are never deleted and re-inserted, so (user_id, name) stays unique
        within a single flush.
        """
        wanted = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
        for link in list(self.category_links):
            if link.name not in wanted:
                self.category_links.remove(link)
        current = {link.name for link in self.category_links}
        for name in wanted:
            if name not in current:
                self.category_links.append(UserCategory(name=name))

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, is_company={self.is_company})>"


class UserCategory(Base):
    """One row per category a user (company) declares."""
    __tablename__ = "user_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(120), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_category"),
        Index("ix_user_categories_name", "name"),
    )

    user = relationship("User", back_populates="category_links")
