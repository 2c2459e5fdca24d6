from .user import UserCreate, UserRead
from .project import (
    AssignTeamLeadRequest,
    ProjectCreate,
    ProjectDetail,
    ProjectMemberRead,
    ProjectRead,
    ProjectSummary,
    ProjectUpdate,
)
from .invitation import InvitationCreate, InvitationDirection, InvitationRead, InvitationView
from .task import TaskCompletionUpdate, TaskCreate, TaskRead, TaskUpdate
from .notification import MarkAllReadResult, NotificationRead, UnreadCount

__all__ = [
    "UserCreate",
    "UserRead",
    "AssignTeamLeadRequest",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectMemberRead",
    "ProjectRead",
    "ProjectSummary",
    "ProjectUpdate",
    "InvitationCreate",
    "InvitationDirection",
    "InvitationRead",
    "InvitationView",
    "TaskCompletionUpdate",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "MarkAllReadResult",
    "NotificationRead",
    "UnreadCount",
]
