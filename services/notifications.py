# services/notifications.py
import logging
from typing import Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from model.social.models import Notification
from schema.common import ActionResult
from schema.notification import NotificationOut, NotificationsResponse
from src.utils import NOT_AUTHENTICATED

logger = logging.getLogger(__name__)


def get_unread_count(db: Session, viewer_id: Optional[str]) -> int:
    if not viewer_id:
        return 0
    count = db.scalar(
        select(func.count(Notification.id)).where(
            Notification.user_id == viewer_id, Notification.read.is_(False)
        )
    )
    return int(count or 0)


def get_notifications(db: Session, viewer_id: Optional[str]) -> NotificationsResponse:
    """The viewer's notifications, newest first, with actor and post/comment excerpts."""
    if not viewer_id:
        return NotificationsResponse(success=True)

    try:
        rows = db.scalars(
            select(Notification)
            .where(Notification.user_id == viewer_id)
            .options(
                selectinload(Notification.creator),
                selectinload(Notification.post),
                selectinload(Notification.comment),
            )
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        ).all()
        return NotificationsResponse(
            success=True,
            notifications=[NotificationOut.model_validate(n) for n in rows],
            unread_count=sum(1 for n in rows if not n.read),
        )
    except Exception:
        logger.exception("Failed to load notifications for %s", viewer_id)
        return NotificationsResponse(success=False, error="Failed to fetch notifications")


def mark_notifications_as_read(
    db: Session, viewer_id: Optional[str], notification_ids: Sequence[str]
) -> ActionResult:
    """Bulk mark as read. Ids that belong to other users are ignored."""
    if not viewer_id:
        return ActionResult(success=False, error=NOT_AUTHENTICATED)

    ids = [i for i in dict.fromkeys(notification_ids or []) if i]
    if not ids:
        return ActionResult(success=True)

    try:
        result = db.execute(
            update(Notification)
            .where(Notification.id.in_(ids), Notification.user_id == viewer_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        logger.debug("Marked %s notifications read for %s", result.rowcount, viewer_id)
        return ActionResult(success=True)
    except Exception:
        db.rollback()
        logger.exception("Failed to mark notifications read for %s", viewer_id)
        return ActionResult(success=False, error="Failed to mark notifications as read")
