"""
Notifications: listing, unread counts and mark-as-read restricted to the
recipient.
"""
from model.social.enum import NotificationType
from model.social.models import Notification
from services.notifications import get_notifications, get_unread_count, mark_notifications_as_read
from services.posts import create_comment, toggle_like


class TestNotifications:

    def test_listing_newest_first_with_excerpts(self, db_session, make_user, make_post):
        author, fan = make_user(), make_user()
        post = make_post(author, "Mi huerto")
        toggle_like(db_session, fan.id, post.id)
        create_comment(db_session, fan.id, post.id, "¡Qué lindo!")

        result = get_notifications(db_session, author.id)
        assert result.success
        assert result.unread_count == 2
        types = {n.type for n in result.notifications}
        assert types == {NotificationType.LIKE, NotificationType.COMMENT}
        comment_notification = next(n for n in result.notifications if n.type == NotificationType.COMMENT)
        assert comment_notification.creator.id == fan.id
        assert comment_notification.post.content == "Mi huerto"
        assert comment_notification.comment.content == "¡Qué lindo!"
        created = [n.created_at for n in result.notifications]
        assert created == sorted(created, reverse=True)

    def test_anonymous_gets_empty_list(self, db_session):
        result = get_notifications(db_session, None)
        assert result.success
        assert result.notifications == []
        assert get_unread_count(db_session, None) == 0

    def test_mark_read_only_own(self, db_session, make_user, make_post):
        author, fan, intruder = make_user(), make_user(), make_user()
        post = make_post(author)
        toggle_like(db_session, fan.id, post.id)
        notification_id = db_session.query(Notification.id).scalar()

        assert mark_notifications_as_read(db_session, intruder.id, [notification_id]).success
        assert get_unread_count(db_session, author.id) == 1

        assert mark_notifications_as_read(db_session, author.id, [notification_id]).success
        assert get_unread_count(db_session, author.id) == 0

    def test_mark_read_requires_viewer(self, db_session):
        assert mark_notifications_as_read(db_session, None, ["NTF-1-AAAAAAAA"]).success is False

    def test_empty_id_list_is_a_no_op(self, db_session, make_user):
        assert mark_notifications_as_read(db_session, make_user().id, []).success
