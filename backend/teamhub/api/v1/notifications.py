from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamhub.api.deps import get_auth_context
from teamhub.core.auth_context import AuthContext
from teamhub.database import get_db
from teamhub.schemas.notification import MarkAllReadResult, NotificationRead, UnreadCount
from teamhub.services import notification_service


router = APIRouter()


@router.get("/", response_model=List[NotificationRead])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return notification_service.list_notifications(db, ctx, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return UnreadCount(count=notification_service.unread_count(db, ctx))


@router.patch("/mark-all-read", response_model=MarkAllReadResult)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return MarkAllReadResult(updated=notification_service.mark_all_read(db, ctx))


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return notification_service.mark_read(db, ctx, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    notification_service.delete_notification(db, ctx, notification_id)
    return None
