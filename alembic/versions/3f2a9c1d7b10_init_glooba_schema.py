"""init glooba schema

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2025-06-19 16:54:49.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ID = sa.String(40)
notification_type = sa.Enum("LIKE", "COMMENT", "FOLLOW", name="notification_type")
scope_type = sa.Enum("COUNTRY", "REGION", "COMMUNE", name="scope_type")


def _user_fk(name, ondelete="CASCADE", nullable=False):
    return sa.Column(name, ID, sa.ForeignKey("users.id", ondelete=ondelete), nullable=nullable)


def upgrade():
    # users
    op.create_table(
        "users",
        sa.Column("id", ID, primary_key=True),
        sa.Column("clerk_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("username", sa.String(120), nullable=False, unique=True),
        sa.Column("name", sa.String(255)),
        sa.Column("bio", sa.Text),
        sa.Column("location", sa.String(255)),
        sa.Column("website", sa.String(512)),
        sa.Column("image", sa.String(1024)),
        sa.Column("background_image", sa.String(1024)),
        sa.Column("is_company", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("profile_views", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_users_clerk_id", "users", ["clerk_id"], unique=True)
    op.create_index("ix_users_is_company_name", "users", ["is_company", "name"])

    op.create_table(
        "user_categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk("user_id"),
        sa.Column("name", sa.String(120), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_user_category"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_user_categories_user_id", "user_categories", ["user_id"])
    op.create_index("ix_user_categories_name", "user_categories", ["name"])

    # follow graph
    op.create_table(
        "follows",
        _user_fk("follower_id"),
        _user_fk("following_id"),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.PrimaryKeyConstraint("follower_id", "following_id", name="pk_follows"),
        sa.CheckConstraint("follower_id != following_id", name="ck_no_self_follow"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_follows_following", "follows", ["following_id", "created_at"])

    # posts / comments / likes
    op.create_table(
        "posts",
        sa.Column("id", ID, primary_key=True),
        _user_fk("author_id"),
        sa.Column("content", sa.Text),
        sa.Column("image", sa.String(1024)),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_posts_author", "posts", ["author_id", "created_at"])
    op.create_index("idx_posts_created", "posts", ["created_at"])

    op.create_table(
        "comments",
        sa.Column("id", ID, primary_key=True),
        sa.Column("content", sa.Text, nullable=False),
        _user_fk("author_id"),
        sa.Column("post_id", ID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_comments_author_post", "comments", ["author_id", "post_id"])
    op.create_index("idx_comments_post", "comments", ["post_id", "created_at"])

    op.create_table(
        "likes",
        sa.Column("id", ID, primary_key=True),
        _user_fk("user_id"),
        sa.Column("post_id", ID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_likes_post", "likes", ["post_id"])

    op.create_table(
        "notifications",
        sa.Column("id", ID, primary_key=True),
        _user_fk("user_id"),
        _user_fk("creator_id"),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("post_id", ID, sa.ForeignKey("posts.id", ondelete="CASCADE")),
        sa.Column("comment_id", ID, sa.ForeignKey("comments.id", ondelete="CASCADE")),
        sa.Column("created_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_notifications_user", "notifications", ["user_id", "created_at"])

    # reviews
    op.create_table(
        "reviews",
        sa.Column("id", ID, primary_key=True),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("content", sa.Text),
        _user_fk("author_id"),
        _user_fk("company_id"),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("author_id", "company_id", name="uq_review_author_company"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_review_rating_range"),
        sa.CheckConstraint("author_id != company_id", name="ck_no_self_review"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_reviews_company_created", "reviews", ["company_id", "created_at"])

    # inbound messages
    op.create_table(
        "feedback",
        sa.Column("id", ID, primary_key=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("email", sa.String(255)),
        _user_fk("user_id", ondelete="SET NULL", nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "company_requests",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(64)),
        sa.Column("website", sa.String(512)),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("sustainability", sa.Text),
        sa.Column("created_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )

    # geography and service scope
    op.create_table(
        "regions",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "communes",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("region_id", ID, sa.ForeignKey("regions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("name", "region_id", name="uq_commune_name_region"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_communes_region_id", "communes", ["region_id"])

    op.create_table(
        "company_service_areas",
        sa.Column("id", ID, primary_key=True),
        _user_fk("company_id"),
        sa.Column("scope", scope_type, nullable=False),
        sa.Column("region_id", ID, sa.ForeignKey("regions.id", ondelete="CASCADE")),
        sa.Column("commune_id", ID, sa.ForeignKey("communes.id", ondelete="CASCADE")),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
    )
    op.create_index("idx_service_areas_company", "company_service_areas", ["company_id"])
    op.create_index("idx_service_areas_region", "company_service_areas", ["region_id"])
    op.create_index("idx_service_areas_commune", "company_service_areas", ["commune_id"])


def downgrade():
    for table in (
        "company_service_areas",
        "communes",
        "regions",
        "company_requests",
        "feedback",
        "reviews",
        "notifications",
        "likes",
        "comments",
        "posts",
        "follows",
        "user_categories",
        "users",
    ):
        op.drop_table(table)
    notification_type.drop(op.get_bind(), checkfirst=True)
    scope_type.drop(op.get_bind(), checkfirst=True)
