from sqlalchemy import Column, Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from teamhub.database import Base, utcnow

import enum
import uuid


class NotificationType(str, enum.Enum):
    INVITATION = "invitation"
    TASK_ASSIGNED = "task_assigned"
    ROLE_CHANGE = "role_change"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(100), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True)
    related_invitation_id = Column(Uuid, ForeignKey("invitations.id", ondelete="CASCADE"), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="notifications")
    project = relationship("Project", back_populates="notifications")
    invitation = relationship("Invitation")

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}', read={self.is_read})>"
