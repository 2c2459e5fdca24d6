"""Project role permissions for the collaboration workflow.

Every operation that reads or changes project state is listed in
``OPERATION_MIN_ROLE`` with the lowest project role allowed to perform it.
Services call ``require_permission`` before any write, so role rules live in
this table rather than at the call sites.

Fail-closed: unknown operations or callers without a membership are denied.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from teamhub.core.auth_context import AuthContext
from teamhub.core.exceptions import ForbiddenError
from teamhub.models import ProjectMember, ProjectRole

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    PROJECT_VIEW = "project:view"
    PROJECT_UPDATE = "project:update"
    PROJECT_DELETE = "project:delete"
    MEMBER_ASSIGN_LEAD = "member:assign_lead"
    MEMBER_REMOVE = "member:remove"
    MEMBER_LEAVE = "member:leave"
    INVITATION_SEND = "invitation:send"
    TASK_VIEW = "task:view"
    TASK_CREATE = "task:create"
    TASK_UPDATE = "task:update"
    TASK_DELETE = "task:delete"


# Role hierarchy (higher includes lower)
ROLE_HIERARCHY = {
    ProjectRole.TEAM_LEAD.value: 2,
    ProjectRole.TEAM_MEMBER.value: 1,
}

OPERATION_MIN_ROLE: Dict[Operation, ProjectRole] = {
    # === Any member ===
    Operation.PROJECT_VIEW: ProjectRole.TEAM_MEMBER,
    Operation.TASK_VIEW: ProjectRole.TEAM_MEMBER,
    Operation.MEMBER_LEAVE: ProjectRole.TEAM_MEMBER,

    # === Team leads only ===
    Operation.PROJECT_UPDATE: ProjectRole.TEAM_LEAD,
    Operation.PROJECT_DELETE: ProjectRole.TEAM_LEAD,
    Operation.MEMBER_ASSIGN_LEAD: ProjectRole.TEAM_LEAD,
    Operation.MEMBER_REMOVE: ProjectRole.TEAM_LEAD,
    Operation.INVITATION_SEND: ProjectRole.TEAM_LEAD,
    Operation.TASK_CREATE: ProjectRole.TEAM_LEAD,
    Operation.TASK_UPDATE: ProjectRole.TEAM_LEAD,
    Operation.TASK_DELETE: ProjectRole.TEAM_LEAD,
}

# Shown to callers who are not members of the project at all.
NOT_A_MEMBER_MESSAGES: Dict[Operation, str] = {
    Operation.PROJECT_VIEW: "You are not a member of this project",
    Operation.TASK_VIEW: "You must be a member of this project to view tasks",
    Operation.MEMBER_LEAVE: "You are not a member of this project",
}

# Shown to members whose role is too low.
INSUFFICIENT_ROLE_MESSAGES: Dict[Operation, str] = {
    Operation.PROJECT_UPDATE: "Only team leads can update project details",
    Operation.PROJECT_DELETE: "Only team leads can delete projects",
    Operation.MEMBER_ASSIGN_LEAD: "Only team leads can assign team lead role",
    Operation.MEMBER_REMOVE: "Only team leads can remove members",
    Operation.INVITATION_SEND: "Only team leads can send invitations",
    Operation.TASK_CREATE: "Only team leads can create tasks",
    Operation.TASK_UPDATE: "Only team leads can update task details",
    Operation.TASK_DELETE: "Only team leads can delete tasks",
}


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    role: Optional[ProjectRole]
    reason: str = ""


def get_role_level(role) -> int:
    """Get numeric level for role comparison."""
    if role is None:
        return 0
    value = role.value if isinstance(role, ProjectRole) else str(role).lower()
    return ROLE_HIERARCHY.get(value, 0)


def can_perform(operation: Operation, role: Optional[ProjectRole]) -> bool:
    """Check whether a member holding ``role`` may perform ``operation``."""
    min_role = OPERATION_MIN_ROLE.get(operation)
    if min_role is None:
        logger.warning("Unknown operation '%s' - denying access (fail-closed)", operation)
        return False
    if role is None:
        return False
    return get_role_level(role) >= get_role_level(min_role)


def get_member_role(db: Session, project_id: UUID, user_id: UUID) -> Optional[ProjectRole]:
    membership = (
        db.query(ProjectMember.role)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )
    return membership.role if membership else None


def get_permission_error(operation: Operation, role: Optional[ProjectRole]) -> str:
    if role is None:
        return NOT_A_MEMBER_MESSAGES.get(operation, "Only team leads can perform this action")
    return INSUFFICIENT_ROLE_MESSAGES.get(operation, "Insufficient permissions")


def check_permission(
    db: Session,
    operation: Operation,
    ctx: AuthContext,
    project_id: UUID,
) -> PermissionDecision:
    role = get_member_role(db, project_id, ctx.user_id)
    if can_perform(operation, role):
        return PermissionDecision(allowed=True, role=role)
    return PermissionDecision(allowed=False, role=role, reason=get_permission_error(operation, role))


def require_permission(
    db: Session,
    operation: Operation,
    ctx: AuthContext,
    project_id: UUID,
) -> ProjectRole:
    """Return the caller's role, or raise ForbiddenError when the table denies it."""
    decision = check_permission(db, operation, ctx, project_id)
    if not decision.allowed:
        logger.debug(
            "Denied %s on project %s for user %s (role=%s)",
            operation.value,
            project_id,
            ctx.user_id,
            decision.role.value if decision.role else None,
        )
        raise ForbiddenError(decision.reason)
    return decision.role
