from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from teamhub.models.project_member import ProjectRole


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_by: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectSummary(ProjectRead):
    """A project as seen by one user: their role plus creator display fields."""

    user_role: Optional[ProjectRole] = None
    created_by_username: Optional[str] = None
    created_by_email: Optional[str] = None


class ProjectMemberRead(BaseModel):
    user_id: UUID
    username: str
    email: str
    role: ProjectRole
    joined_at: datetime


class ProjectDetail(BaseModel):
    project: ProjectSummary
    members: List[ProjectMemberRead]


class AssignTeamLeadRequest(BaseModel):
    member_id: UUID
