from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamhub.api.deps import get_auth_context
from teamhub.core.auth_context import AuthContext
from teamhub.database import get_db
from teamhub.schemas.project import (
    AssignTeamLeadRequest,
    ProjectCreate,
    ProjectDetail,
    ProjectMemberRead,
    ProjectSummary,
    ProjectUpdate,
)
from teamhub.services import project_service


router = APIRouter()


@router.post("/", response_model=ProjectSummary, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.create_project(db, ctx, name=payload.name, description=payload.description)


@router.get("/", response_model=List[ProjectSummary])
def list_my_projects(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.list_projects_for_user(db, ctx)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.get_project_detail(db, ctx, project_id)


@router.patch("/{project_id}", response_model=ProjectSummary)
def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.update_project(db, ctx, project_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    project_service.delete_project(db, ctx, project_id)
    return None


@router.get("/{project_id}/members", response_model=List[ProjectMemberRead])
def list_members(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.get_project_detail(db, ctx, project_id).members


@router.post("/{project_id}/team-lead", response_model=ProjectMemberRead)
def assign_team_lead(
    project_id: UUID,
    payload: AssignTeamLeadRequest,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return project_service.assign_team_lead(db, ctx, project_id, payload.member_id)


@router.post("/{project_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
def leave_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    project_service.leave_project(db, ctx, project_id)
    return None


@router.delete("/{project_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    project_id: UUID,
    member_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    project_service.remove_member(db, ctx, project_id, member_id)
    return None
