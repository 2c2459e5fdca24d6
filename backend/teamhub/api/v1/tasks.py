from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamhub.api.deps import get_auth_context
from teamhub.core.auth_context import AuthContext
from teamhub.database import get_db
from teamhub.schemas.task import TaskCompletionUpdate, TaskCreate, TaskRead, TaskUpdate
from teamhub.services import task_service


router = APIRouter()


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.create_task(
        db,
        ctx,
        project_id=payload.project_id,
        assigned_to=payload.assigned_to,
        title=payload.title,
        description=payload.description,
    )


@router.get("/project/{project_id}", response_model=List[TaskRead])
def list_project_tasks(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.list_project_tasks(db, ctx, project_id)


@router.get("/project/{project_id}/my-tasks", response_model=List[TaskRead])
def list_my_tasks(
    project_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.list_my_tasks(db, ctx, project_id)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.get_task(db, ctx, task_id)


@router.patch("/{task_id}/complete", response_model=TaskRead)
def update_task_completion(
    task_id: UUID,
    payload: TaskCompletionUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.set_completion(db, ctx, task_id, payload.is_completed)


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return task_service.update_task(db, ctx, task_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    task_service.delete_task(db, ctx, task_id)
    return None
