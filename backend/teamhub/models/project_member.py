from sqlalchemy import Column, Enum, ForeignKey, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from teamhub.database import Base, utcnow

import enum
import uuid


class ProjectRole(str, enum.Enum):
    TEAM_LEAD = "team_lead"
    TEAM_MEMBER = "team_member"


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(
            ProjectRole,
            name="projectrole",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=ProjectRole.TEAM_MEMBER,
        nullable=False,
    )
    joined_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="project_memberships")

    def __repr__(self) -> str:
        return f"<ProjectMember(project_id={self.project_id}, user_id={self.user_id}, role={self.role})>"
