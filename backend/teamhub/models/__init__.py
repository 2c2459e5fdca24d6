from .user import User
from .project import Project
from .project_member import ProjectMember, ProjectRole
from .invitation import Invitation, InvitationStatus
from .task import Task, TaskStatus
from .notification import Notification, NotificationType

__all__ = [
    "User",
    "Project",
    "ProjectMember",
    "ProjectRole",
    "Invitation",
    "InvitationStatus",
    "Task",
    "TaskStatus",
    "Notification",
    "NotificationType",
]
