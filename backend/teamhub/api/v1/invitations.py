from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamhub.api.deps import get_auth_context
from teamhub.core.auth_context import AuthContext
from teamhub.database import get_db
from teamhub.schemas.invitation import InvitationCreate, InvitationDirection, InvitationRead, InvitationView
from teamhub.services import invitation_service


router = APIRouter()


@router.post("/", response_model=InvitationView, status_code=status.HTTP_201_CREATED)
def send_invitation(
    payload: InvitationCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.send_invitation(
        db,
        ctx,
        project_id=payload.project_id,
        invitee_email=payload.invitee_email,
        message=payload.message,
    )


@router.get("/", response_model=List[InvitationView])
def list_my_invitations(
    type: InvitationDirection = InvitationDirection.RECEIVED,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.list_invitations(db, ctx, type)


@router.get("/pending", response_model=List[InvitationView])
def list_pending_invitations(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.list_pending(db, ctx)


@router.get("/{invitation_id}", response_model=InvitationRead)
def get_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.get_invitation(db, ctx, invitation_id)


@router.post("/{invitation_id}/accept", response_model=InvitationRead)
def accept_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.accept_invitation(db, ctx, invitation_id)


@router.post("/{invitation_id}/reject", response_model=InvitationRead)
def reject_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.reject_invitation(db, ctx, invitation_id)


@router.post("/{invitation_id}/cancel", response_model=InvitationRead)
def cancel_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return invitation_service.cancel_invitation(db, ctx, invitation_id)
