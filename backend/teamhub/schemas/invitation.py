"""
Pydantic schemas for project invitations.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr

from teamhub.models.invitation import InvitationStatus


class InvitationDirection(str, Enum):
    RECEIVED = "received"
    SENT = "sent"


class InvitationCreate(BaseModel):
    project_id: UUID
    invitee_email: EmailStr
    message: Optional[str] = None


class InvitationRead(BaseModel):
    id: UUID
    project_id: UUID
    inviter_id: UUID
    invitee_id: UUID
    message: Optional[str] = None
    status: InvitationStatus
    created_at: datetime
    responded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvitationView(InvitationRead):
    """Invitation joined with its project and the user on the other side."""

    project_name: str
    project_description: Optional[str] = None
    counterpart_username: str
    counterpart_email: str
