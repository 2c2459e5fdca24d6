"""
Invitation model for asking a registered user to join a project.

Lifecycle: pending -> accepted | rejected. Cancellation by the inviter also
lands in rejected. Terminal rows are never reopened; re-inviting creates a
new row.
"""

from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Index, Uuid
from sqlalchemy.orm import relationship
import enum
import uuid

from teamhub.database import Base, utcnow


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Invitation(Base):
    __tablename__ = "invitations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    inviter_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    invitee_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=InvitationStatus.PENDING.value)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    project = relationship("Project", back_populates="invitations")
    inviter = relationship("User", foreign_keys=[inviter_id])
    invitee = relationship("User", foreign_keys=[invitee_id])

    __table_args__ = (
        Index("ix_invitations_project_invitee_status", "project_id", "invitee_id", "status"),
    )

    def __repr__(self):
        return f"<Invitation {self.inviter_id} -> {self.invitee_id} for Project {self.project_id} ({self.status})>"
