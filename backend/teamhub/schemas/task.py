from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool


class TaskCreate(BaseModel):
    project_id: UUID
    assigned_to: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    assigned_to: Optional[UUID] = None
    # Checked against TaskStatus by the service so the error matches other validation failures.
    status: Optional[str] = None


class TaskCompletionUpdate(BaseModel):
    # Strict so "true", "yes" or 1 are rejected instead of coerced.
    is_completed: StrictBool


class TaskRead(BaseModel):
    id: UUID
    project_id: UUID
    created_by: Optional[UUID] = None
    assigned_to: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    status: str
    is_completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    created_by_username: Optional[str] = None
    assigned_to_username: Optional[str] = None
    assigned_to_email: Optional[str] = None

    class Config:
        from_attributes = True
