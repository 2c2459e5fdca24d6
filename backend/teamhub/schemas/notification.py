from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    related_project_id: Optional[UUID] = None
    related_invitation_id: Optional[UUID] = None
    project_name: Optional[str] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    count: int


class MarkAllReadResult(BaseModel):
    updated: int
