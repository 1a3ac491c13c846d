# routes/notifications.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.common import ActionResult
from schema.notification import MarkReadRequest, NotificationsResponse
from services import notifications as notification_service
from src.route_helpers import viewer_id_of

router = APIRouter(prefix="/v1/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationsResponse)
def list_notifications(
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return notification_service.get_notifications(db, viewer_id_of(viewer))


@router.get("/unread-count")
def unread_count(
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return {"unread_count": notification_service.get_unread_count(db, viewer_id_of(viewer))}


@router.post("/read", response_model=ActionResult)
def mark_read(
    payload: MarkReadRequest,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return notification_service.mark_notifications_as_read(
        db, viewer_id_of(viewer), payload.notification_ids
    )
