from model.social.enum import NotificationType
from model.social.models import Post, Comment, Like, Notification

__all__ = ["NotificationType", "Post", "Comment", "Like", "Notification"]
