"""Notifications written as side effects of collaboration events.

Delivery is pull-based: clients poll ``list_notifications`` / ``unread_count``.

Side-effect writes go through ``safe_notify`` after the primary change has
been committed. A failing notification write is rolled back and logged; it
never undoes or fails the primary operation and is not retried.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamhub.core.auth_context import AuthContext
from teamhub.core.config import settings
from teamhub.core.exceptions import NotFoundError, ValidationError
from teamhub.models import Invitation, Notification, NotificationType, Project, User
from teamhub.schemas.notification import NotificationRead

logger = logging.getLogger(__name__)


def _serialize(notification: Notification, project_name: Optional[str] = None) -> NotificationRead:
    data = NotificationRead.model_validate(notification, from_attributes=True)
    return data.model_copy(update={"project_name": project_name})


def create_notification(
    db: Session,
    *,
    user_id: UUID,
    type: NotificationType | str,
    title: str,
    message: str,
    related_project_id: Optional[UUID] = None,
    related_invitation_id: Optional[UUID] = None,
) -> Notification:
    if not user_id or not type or not (title or "").strip() or not (message or "").strip():
        raise ValidationError("User ID, type, title, and message are required")

    notification = Notification(
        user_id=user_id,
        type=type.value if isinstance(type, NotificationType) else type,
        title=title.strip(),
        message=message.strip(),
        related_project_id=related_project_id,
        related_invitation_id=related_invitation_id,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def notify_invitation(db: Session, invitation: Invitation, project: Project, inviter: Optional[User]) -> Notification:
    inviter_name = inviter.username if inviter else "a team lead"
    return create_notification(
        db,
        user_id=invitation.invitee_id,
        type=NotificationType.INVITATION,
        title=f"Project Invitation: {project.name}",
        message=f'You have been invited to join the project "{project.name}" by {inviter_name}.',
        related_project_id=project.id,
        related_invitation_id=invitation.id,
    )


def notify_role_change(db: Session, user_id: UUID, project: Project, new_role: str) -> Notification:
    return create_notification(
        db,
        user_id=user_id,
        type=NotificationType.ROLE_CHANGE,
        title=f"Role Updated in {project.name}",
        message=f'Your role in "{project.name}" has been changed to {new_role}.',
        related_project_id=project.id,
    )


def notify_task_assigned(db: Session, user_id: UUID, project: Project, task_title: str) -> Notification:
    return create_notification(
        db,
        user_id=user_id,
        type=NotificationType.TASK_ASSIGNED,
        title=f"New Task: {task_title}",
        message=f'You have been assigned a new task in "{project.name}" project.',
        related_project_id=project.id,
    )


def safe_notify(db: Session, builder: Callable[..., Notification], *args, **kwargs) -> Optional[Notification]:
    """Run a notification builder after the primary write has committed.

    Returns None when notifications are disabled or the write failed.
    """
    if not settings.NOTIFICATIONS_ENABLED:
        return None
    try:
        return builder(db, *args, **kwargs)
    except (SQLAlchemyError, ValidationError):
        db.rollback()
        logger.exception(
            "Notification write failed in %s; primary change kept",
            getattr(builder, "__name__", repr(builder)),
        )
        return None


def list_notifications(db: Session, ctx: AuthContext, *, unread_only: bool = False) -> List[NotificationRead]:
    query = (
        db.query(Notification, Project.name)
        .outerjoin(Project, Notification.related_project_id == Project.id)
        .filter(Notification.user_id == ctx.user_id)
    )
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    rows = query.order_by(Notification.created_at.desc()).all()
    return [_serialize(notification, project_name) for notification, project_name in rows]


def unread_count(db: Session, ctx: AuthContext) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == ctx.user_id, Notification.is_read.is_(False))
        .count()
    )


def mark_read(db: Session, ctx: AuthContext, notification_id: UUID) -> NotificationRead:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == ctx.user_id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return _serialize(notification, notification.project.name if notification.project else None)


def mark_all_read(db: Session, ctx: AuthContext) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == ctx.user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, ctx: AuthContext, notification_id: UUID) -> None:
    deleted = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == ctx.user_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError("Notification not found")
    db.commit()
