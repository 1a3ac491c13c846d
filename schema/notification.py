from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from model.social.enum import NotificationType
from schema.common import ActionResult


class NotificationCreator(BaseModel):
    id: str
    name: Optional[str] = None
    username: str
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationPost(BaseModel):
    id: str
    content: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationComment(BaseModel):
    id: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationOut(BaseModel):
    id: str
    type: NotificationType
    read: bool
    created_at: datetime
    creator: NotificationCreator
    post: Optional[NotificationPost] = None
    comment: Optional[NotificationComment] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationsResponse(ActionResult):
    notifications: List[NotificationOut] = Field(default_factory=list)
    unread_count: int = 0


class MarkReadRequest(BaseModel):
    notification_ids: List[str]
