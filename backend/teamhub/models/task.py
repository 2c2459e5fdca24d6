from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from teamhub.database import Base, utcnow

import enum
import uuid


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    assigned_to = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=TaskStatus.PENDING.value)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    project = relationship("Project", back_populates="tasks")
    creator = relationship("User", foreign_keys=[created_by])
    assignee = relationship("User", foreign_keys=[assigned_to])

    def apply_completion(self, is_completed: bool, now: Optional[datetime] = None) -> None:
        """Set the completion flag and the fields derived from it.

        This is the only writer of ``is_completed``; it never produces
        ``in_progress``.
        """
        self.is_completed = is_completed
        if is_completed:
            self.status = TaskStatus.COMPLETED.value
            self.completed_at = now or utcnow()
        else:
            self.status = TaskStatus.PENDING.value
            self.completed_at = None

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, project_id={self.project_id}, status={self.status})>"
