"""Tests for notification storage and the best-effort side-effect writer."""

import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from teamhub.core.config import settings
from teamhub.core.exceptions import NotFoundError, ValidationError
from teamhub.models import Invitation, Notification, NotificationType
from teamhub.services import invitation_service, notification_service

from conftest import ctx_for


def _notify(db, user, project=None, title="Hello"):
    return notification_service.create_notification(
        db,
        user_id=user.id,
        type=NotificationType.TASK_ASSIGNED,
        title=title,
        message="Something happened",
        related_project_id=project.id if project else None,
    )


class TestCreateNotification:

    def test_create(self, db, bob, project):
        notification = _notify(db, bob, project)
        assert notification.type == "task_assigned"
        assert notification.is_read is False

    @pytest.mark.parametrize("title,message", [("", "body"), ("title", "   ")])
    def test_requires_title_and_message(self, db, bob, title, message):
        with pytest.raises(ValidationError):
            notification_service.create_notification(
                db, user_id=bob.id, type="invitation", title=title, message=message
            )


class TestReadState:

    def test_list_includes_project_name(self, db, bob, project):
        _notify(db, bob, project)
        _notify(db, bob, None, title="No project")

        listed = notification_service.list_notifications(db, ctx_for(bob))
        names = {n.title: n.project_name for n in listed}
        assert names == {"Hello": "Alpha", "No project": None}

    def test_unread_count_and_mark_read(self, db, bob, carol, project):
        first = _notify(db, bob, project)
        _notify(db, bob, project)
        _notify(db, carol, project)
        bob_ctx = ctx_for(bob)

        assert notification_service.unread_count(db, bob_ctx) == 2

        read = notification_service.mark_read(db, bob_ctx, first.id)
        assert read.is_read is True
        assert read.project_name == "Alpha"
        assert notification_service.unread_count(db, bob_ctx) == 1
        assert len(notification_service.list_notifications(db, bob_ctx, unread_only=True)) == 1

    def test_mark_all_read_only_touches_caller(self, db, bob, carol, project):
        _notify(db, bob, project)
        _notify(db, bob, project)
        _notify(db, carol, project)

        assert notification_service.mark_all_read(db, ctx_for(bob)) == 2
        assert notification_service.unread_count(db, ctx_for(bob)) == 0
        assert notification_service.unread_count(db, ctx_for(carol)) == 1

    def test_cannot_touch_other_users_notification(self, db, bob, carol, project):
        notification = _notify(db, bob, project)
        with pytest.raises(NotFoundError):
            notification_service.mark_read(db, ctx_for(carol), notification.id)
        with pytest.raises(NotFoundError):
            notification_service.delete_notification(db, ctx_for(carol), notification.id)

    def test_delete(self, db, bob, project):
        notification = _notify(db, bob, project)
        notification_service.delete_notification(db, ctx_for(bob), notification.id)
        assert db.query(Notification).count() == 0

        with pytest.raises(NotFoundError):
            notification_service.delete_notification(db, ctx_for(bob), uuid.uuid4())


class TestSafeNotify:

    def test_failed_write_keeps_primary_change(self, db, project, alice_ctx, bob, monkeypatch, caplog):
        def broken_create(*args, **kwargs):
            raise SQLAlchemyError("notifications table unavailable")

        monkeypatch.setattr(notification_service, "create_notification", broken_create)

        invitation = invitation_service.send_invitation(
            db, alice_ctx, project_id=project.id, invitee_email=bob.email
        )

        assert db.query(Invitation).filter(Invitation.id == invitation.id).one().status == "pending"
        assert db.query(Notification).count() == 0
        assert "Notification write failed in notify_invitation" in caplog.text

    def test_disabled_notifications_are_skipped(self, db, project, alice_ctx, bob, monkeypatch):
        monkeypatch.setattr(settings, "NOTIFICATIONS_ENABLED", False)

        invitation_service.send_invitation(db, alice_ctx, project_id=project.id, invitee_email=bob.email)

        assert db.query(Invitation).count() == 1
        assert db.query(Notification).count() == 0
