"""Project lifecycle and membership roster."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case
from sqlalchemy.orm import Session, aliased

from teamhub.core.auth_context import AuthContext
from teamhub.core.exceptions import BadRequestError, ForbiddenError, NoFieldsError, NotFoundError, ValidationError
from teamhub.models import Project, ProjectMember, ProjectRole, User
from teamhub.schemas.project import ProjectDetail, ProjectMemberRead, ProjectRead, ProjectSummary
from teamhub.services import notification_service
from teamhub.services.permissions import Operation, get_member_role, require_permission

logger = logging.getLogger(__name__)

_UNSET = object()


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _get_project_or_404(db: Session, project_id: UUID) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    return project


def _add_membership(db: Session, project_id: UUID, user_id: UUID, role: ProjectRole) -> ProjectMember:
    membership = ProjectMember(project_id=project_id, user_id=user_id, role=role)
    db.add(membership)
    db.flush()
    return membership


def _summary(project: Project, role: Optional[ProjectRole], creator: Optional[User]) -> ProjectSummary:
    base = ProjectRead.model_validate(project, from_attributes=True)
    return ProjectSummary(
        **base.model_dump(),
        user_role=role,
        created_by_username=creator.username if creator else None,
        created_by_email=creator.email if creator else None,
    )


def create_project(
    db: Session,
    ctx: AuthContext,
    *,
    name: str,
    description: Optional[str] = None,
) -> ProjectSummary:
    """Create a project with the caller as its first team lead.

    Both rows are written in one transaction; if either insert fails nothing
    is kept.
    """
    if not name or not name.strip():
        raise ValidationError("Project name is required")

    try:
        project = Project(
            name=name.strip(),
            description=_clean_optional(description),
            created_by=ctx.user_id,
        )
        db.add(project)
        db.flush()
        _add_membership(db, project.id, ctx.user_id, ProjectRole.TEAM_LEAD)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(project)
    logger.info("Project %s created by %s", project.id, ctx.user_id)
    return _summary(project, ProjectRole.TEAM_LEAD, project.owner)


def list_projects_for_user(db: Session, ctx: AuthContext) -> List[ProjectSummary]:
    creator = aliased(User)
    rows = (
        db.query(Project, ProjectMember.role, creator)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .outerjoin(creator, Project.created_by == creator.id)
        .filter(ProjectMember.user_id == ctx.user_id)
        .order_by(Project.created_at.desc())
        .all()
    )
    return [_summary(project, role, owner) for project, role, owner in rows]


def get_project(db: Session, project_id: UUID, viewer: Optional[AuthContext] = None) -> ProjectSummary:
    """Project metadata, plus the viewer's role when a viewer is given.

    The role is None when the viewer is not a member.
    """
    project = _get_project_or_404(db, project_id)
    role = get_member_role(db, project.id, viewer.user_id) if viewer else None
    return _summary(project, role, project.owner)


def get_members(db: Session, project_id: UUID) -> List[ProjectMemberRead]:
    """Roster ordered team leads first, then by ascending join time."""
    lead_first = case((ProjectMember.role == ProjectRole.TEAM_LEAD, 0), else_=1)
    rows = (
        db.query(ProjectMember, User)
        .join(User, ProjectMember.user_id == User.id)
        .filter(ProjectMember.project_id == project_id)
        .order_by(lead_first, ProjectMember.joined_at.asc())
        .all()
    )
    return [
        ProjectMemberRead(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=membership.role,
            joined_at=membership.joined_at,
        )
        for membership, user in rows
    ]


def get_project_detail(db: Session, ctx: AuthContext, project_id: UUID) -> ProjectDetail:
    project = get_project(db, project_id, viewer=ctx)
    require_permission(db, Operation.PROJECT_VIEW, ctx, project_id)
    return ProjectDetail(project=project, members=get_members(db, project_id))


def is_team_lead(db: Session, project_id: UUID, user_id: UUID) -> bool:
    return get_member_role(db, project_id, user_id) == ProjectRole.TEAM_LEAD


def is_member(db: Session, project_id: UUID, user_id: UUID) -> bool:
    return get_member_role(db, project_id, user_id) is not None


def update_project(
    db: Session,
    ctx: AuthContext,
    project_id: UUID,
    *,
    name=_UNSET,
    description=_UNSET,
) -> ProjectSummary:
    """Partial update; only the keyword arguments actually passed are written."""
    project = _get_project_or_404(db, project_id)
    role = require_permission(db, Operation.PROJECT_UPDATE, ctx, project_id)

    updates = {}
    if name is not _UNSET:
        if not name or not str(name).strip():
            raise ValidationError("Project name cannot be empty")
        updates["name"] = str(name).strip()
    if description is not _UNSET:
        updates["description"] = _clean_optional(description)

    if not updates:
        raise NoFieldsError()

    for field, value in updates.items():
        setattr(project, field, value)
    db.commit()
    db.refresh(project)

    logger.info("Project %s updated fields %s", project.id, sorted(updates))
    return _summary(project, role, project.owner)


def assign_team_lead(db: Session, ctx: AuthContext, project_id: UUID, member_id: UUID) -> ProjectMemberRead:
    """Promote an existing member to team lead. The caller keeps their role."""
    project = _get_project_or_404(db, project_id)
    require_permission(db, Operation.MEMBER_ASSIGN_LEAD, ctx, project_id)

    membership = (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == member_id)
        .first()
    )
    if not membership:
        raise NotFoundError("Member not found in this project")

    membership.role = ProjectRole.TEAM_LEAD
    db.commit()
    db.refresh(membership)
    logger.info("User %s promoted to team lead of project %s by %s", member_id, project_id, ctx.user_id)

    result = ProjectMemberRead(
        user_id=membership.user.id,
        username=membership.user.username,
        email=membership.user.email,
        role=membership.role,
        joined_at=membership.joined_at,
    )
    notification_service.safe_notify(
        db,
        notification_service.notify_role_change,
        member_id,
        project,
        ProjectRole.TEAM_LEAD.value,
    )
    return result


def remove_member(db: Session, ctx: AuthContext, project_id: UUID, member_id: UUID) -> None:
    _get_project_or_404(db, project_id)
    require_permission(db, Operation.MEMBER_REMOVE, ctx, project_id)

    if member_id == ctx.user_id:
        raise BadRequestError("You cannot remove yourself from the project")

    deleted = (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == member_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError("Member not found in this project")
    db.commit()
    logger.info("User %s removed from project %s by %s", member_id, project_id, ctx.user_id)


def leave_project(db: Session, ctx: AuthContext, project_id: UUID) -> None:
    _get_project_or_404(db, project_id)
    role = require_permission(db, Operation.MEMBER_LEAVE, ctx, project_id)

    if role == ProjectRole.TEAM_LEAD:
        raise ForbiddenError(
            "Team leads cannot leave projects. Please assign another team lead or delete the project."
        )

    db.query(ProjectMember).filter(
        ProjectMember.project_id == project_id,
        ProjectMember.user_id == ctx.user_id,
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("User %s left project %s", ctx.user_id, project_id)


def delete_project(db: Session, ctx: AuthContext, project_id: UUID) -> None:
    """Delete a project together with its members, tasks, invitations and notifications."""
    project = _get_project_or_404(db, project_id)
    require_permission(db, Operation.PROJECT_DELETE, ctx, project_id)

    db.delete(project)
    db.commit()
    logger.info("Project %s deleted by %s", project_id, ctx.user_id)
