"""Invitation workflow: pending -> accepted | rejected.

Accept, reject and cancel all answer a stale, foreign or unknown invitation
with the same NotFoundError, so callers cannot tell those cases apart.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from teamhub.core.auth_context import AuthContext
from teamhub.core.exceptions import BadRequestError, ConflictError, NotFoundError
from teamhub.database import utcnow
from teamhub.models import Invitation, InvitationStatus, Project, ProjectMember, ProjectRole, User
from teamhub.schemas.invitation import InvitationDirection, InvitationRead, InvitationView
from teamhub.services import notification_service, user_directory
from teamhub.services.permissions import Operation, require_permission

logger = logging.getLogger(__name__)

NOT_FOUND_OR_PROCESSED = "Invitation not found or already processed"

_INSERT_OR_IGNORE = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def _read(invitation: Invitation) -> InvitationRead:
    return InvitationRead.model_validate(invitation, from_attributes=True)


def _view(invitation: Invitation, project: Project, counterpart: User) -> InvitationView:
    return InvitationView(
        **_read(invitation).model_dump(),
        project_name=project.name,
        project_description=project.description,
        counterpart_username=counterpart.username,
        counterpart_email=counterpart.email,
    )


def send_invitation(
    db: Session,
    ctx: AuthContext,
    *,
    project_id: UUID,
    invitee_email: str,
    message: Optional[str] = None,
) -> InvitationView:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    require_permission(db, Operation.INVITATION_SEND, ctx, project_id)

    invitee = user_directory.find_by_email(db, invitee_email)
    if not invitee:
        raise NotFoundError("User with this email not found")
    if invitee.id == ctx.user_id:
        raise BadRequestError("You cannot invite yourself")

    already_member = (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == invitee.id)
        .first()
    )
    if already_member:
        raise ConflictError("User is already a member of this project")

    pending = (
        db.query(Invitation.id)
        .filter(
            Invitation.project_id == project_id,
            Invitation.invitee_id == invitee.id,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        .first()
    )
    if pending:
        raise ConflictError("A pending invitation already exists for this user")

    invitation = Invitation(
        project_id=project_id,
        inviter_id=ctx.user_id,
        invitee_id=invitee.id,
        message=(message or "").strip() or None,
        status=InvitationStatus.PENDING.value,
    )
    db.add(invitation)
    db.commit()
    db.refresh(invitation)
    logger.info("Invitation %s sent to %s for project %s", invitation.id, invitee.id, project_id)

    result = _view(invitation, project, invitee)
    notification_service.safe_notify(
        db,
        notification_service.notify_invitation,
        invitation,
        project,
        invitation.inviter,
    )
    return result


def get_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> InvitationRead:
    invitation = (
        db.query(Invitation)
        .filter(
            Invitation.id == invitation_id,
            or_(Invitation.invitee_id == ctx.user_id, Invitation.inviter_id == ctx.user_id),
        )
        .first()
    )
    if not invitation:
        raise NotFoundError("Invitation not found")
    return _read(invitation)


def _add_member_if_absent(db: Session, project_id: UUID, user_id: UUID) -> None:
    """Insert a team_member row, ignoring a conflict on (project_id, user_id).

    Only PostgreSQL and SQLite are supported. A membership committed by
    another transaction is skipped by the database instead of failing.
    """
    values = {
        "id": uuid.uuid4(),
        "project_id": project_id,
        "user_id": user_id,
        "role": ProjectRole.TEAM_MEMBER,
        "joined_at": utcnow(),
    }
    dialect_insert = _INSERT_OR_IGNORE[db.get_bind().dialect.name]
    db.execute(
        dialect_insert(ProjectMember.__table__)
        .values(**values)
        .on_conflict_do_nothing(index_elements=["project_id", "user_id"])
    )


def accept_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> InvitationRead:
    """Join the project as a team member.

    The invitation row is locked for the whole transaction, so two concurrent
    accepts (or an accept racing a reject) cannot both succeed.
    """
    try:
        invitation = (
            db.query(Invitation)
            .filter(
                Invitation.id == invitation_id,
                Invitation.invitee_id == ctx.user_id,
                Invitation.status == InvitationStatus.PENDING.value,
            )
            .with_for_update()
            .first()
        )
        if not invitation:
            raise NotFoundError(NOT_FOUND_OR_PROCESSED)

        _add_member_if_absent(db, invitation.project_id, ctx.user_id)

        invitation.status = InvitationStatus.ACCEPTED.value
        invitation.responded_at = utcnow()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(invitation)
    logger.info("Invitation %s accepted by %s", invitation.id, ctx.user_id)
    return _read(invitation)


def _close_pending(db: Session, invitation_id: UUID, party_filter) -> InvitationRead:
    updated = (
        db.query(Invitation)
        .filter(
            Invitation.id == invitation_id,
            party_filter,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        .update(
            {
                Invitation.status: InvitationStatus.REJECTED.value,
                Invitation.responded_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        raise NotFoundError(NOT_FOUND_OR_PROCESSED)
    db.commit()

    invitation = db.query(Invitation).filter(Invitation.id == invitation_id).one()
    db.refresh(invitation)
    return _read(invitation)


def reject_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> InvitationRead:
    result = _close_pending(db, invitation_id, Invitation.invitee_id == ctx.user_id)
    logger.info("Invitation %s rejected by %s", invitation_id, ctx.user_id)
    return result


def cancel_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> InvitationRead:
    result = _close_pending(db, invitation_id, Invitation.inviter_id == ctx.user_id)
    logger.info("Invitation %s cancelled by %s", invitation_id, ctx.user_id)
    return result


def list_invitations(
    db: Session,
    ctx: AuthContext,
    direction: InvitationDirection = InvitationDirection.RECEIVED,
    *,
    pending_only: bool = False,
) -> List[InvitationView]:
    """Invitations the caller received or sent, newest first."""
    if direction == InvitationDirection.RECEIVED:
        own_column, counterpart_column = Invitation.invitee_id, Invitation.inviter_id
    else:
        own_column, counterpart_column = Invitation.inviter_id, Invitation.invitee_id

    query = (
        db.query(Invitation, Project, User)
        .join(Project, Invitation.project_id == Project.id)
        .join(User, counterpart_column == User.id)
        .filter(own_column == ctx.user_id)
    )
    if pending_only:
        query = query.filter(Invitation.status == InvitationStatus.PENDING.value)

    rows = query.order_by(Invitation.created_at.desc()).all()
    return [_view(invitation, project, counterpart) for invitation, project, counterpart in rows]


def list_pending(db: Session, ctx: AuthContext) -> List[InvitationView]:
    return list_invitations(db, ctx, InvitationDirection.RECEIVED, pending_only=True)
