"""Task lifecycle inside a project."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, aliased

from teamhub.core.auth_context import AuthContext
from teamhub.core.config import settings
from teamhub.core.exceptions import ForbiddenError, NoFieldsError, NotFoundError, ValidationError
from teamhub.models import Project, ProjectMember, Task, TaskStatus, User
from teamhub.schemas.task import TaskRead
from teamhub.services import notification_service
from teamhub.services.permissions import Operation, require_permission

logger = logging.getLogger(__name__)

_UNSET = object()
VALID_STATUSES = {status.value for status in TaskStatus}


def _is_project_member(db: Session, project_id: UUID, user_id: UUID) -> bool:
    return (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
        is not None
    )


def _get_task_or_404(db: Session, task_id: UUID) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def _serialize(task: Task, creator: Optional[User] = None, assignee: Optional[User] = None) -> TaskRead:
    data = TaskRead.model_validate(task, from_attributes=True)
    return data.model_copy(
        update={
            "created_by_username": creator.username if creator else None,
            "assigned_to_username": assignee.username if assignee else None,
            "assigned_to_email": assignee.email if assignee else None,
        }
    )


def _serialize_loaded(task: Task) -> TaskRead:
    return _serialize(task, task.creator, task.assignee)


def _query_with_people(db: Session):
    creator = aliased(User)
    assignee = aliased(User)
    return (
        db.query(Task, creator, assignee)
        .outerjoin(creator, Task.created_by == creator.id)
        .outerjoin(assignee, Task.assigned_to == assignee.id)
    )


def create_task(
    db: Session,
    ctx: AuthContext,
    *,
    project_id: UUID,
    assigned_to: UUID,
    title: str,
    description: Optional[str] = None,
) -> TaskRead:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    require_permission(db, Operation.TASK_CREATE, ctx, project_id)

    if not title or not title.strip():
        raise ValidationError("Task title is required")
    if not assigned_to or not _is_project_member(db, project_id, assigned_to):
        raise ValidationError("Assigned user must be a member of this project")

    task = Task(
        project_id=project_id,
        created_by=ctx.user_id,
        assigned_to=assigned_to,
        title=title.strip(),
        description=(description or "").strip() or None,
        status=TaskStatus.PENDING.value,
        is_completed=False,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s created in project %s for %s", task.id, project_id, assigned_to)

    result = _serialize_loaded(task)
    notification_service.safe_notify(
        db,
        notification_service.notify_task_assigned,
        assigned_to,
        project,
        task.title,
    )
    return result


def get_task(db: Session, ctx: AuthContext, task_id: UUID) -> TaskRead:
    task = _get_task_or_404(db, task_id)
    require_permission(db, Operation.TASK_VIEW, ctx, task.project_id)
    return _serialize_loaded(task)


def list_project_tasks(db: Session, ctx: AuthContext, project_id: UUID) -> List[TaskRead]:
    require_permission(db, Operation.TASK_VIEW, ctx, project_id)
    rows = (
        _query_with_people(db)
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.desc())
        .all()
    )
    return [_serialize(task, creator, assignee) for task, creator, assignee in rows]


def list_my_tasks(db: Session, ctx: AuthContext, project_id: UUID) -> List[TaskRead]:
    """The caller's tasks in a project: open work first, then newest first."""
    rows = (
        _query_with_people(db)
        .filter(Task.project_id == project_id, Task.assigned_to == ctx.user_id)
        .order_by(Task.is_completed.asc(), Task.created_at.desc())
        .all()
    )
    return [_serialize(task, creator, assignee) for task, creator, assignee in rows]


def set_completion(db: Session, ctx: AuthContext, task_id: UUID, is_completed: bool) -> TaskRead:
    """Toggle completion of a task assigned to the caller.

    The task row stays locked from the ownership check to the write.
    """
    if not isinstance(is_completed, bool):
        raise ValidationError("isCompleted must be a boolean value")

    try:
        task = db.query(Task).filter(Task.id == task_id).with_for_update().first()
        if not task:
            raise NotFoundError("Task not found")
        if task.assigned_to != ctx.user_id:
            raise ForbiddenError("You can only update tasks assigned to you")

        task.apply_completion(is_completed)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(task)
    logger.info("Task %s marked %s by %s", task.id, "completed" if is_completed else "incomplete", ctx.user_id)
    return _serialize_loaded(task)


def update_task(
    db: Session,
    ctx: AuthContext,
    task_id: UUID,
    *,
    title=_UNSET,
    description=_UNSET,
    assigned_to=_UNSET,
    status=_UNSET,
) -> TaskRead:
    """Partial update by a team lead of the task's project.

    ``status`` is written on its own and does not touch ``is_completed``.
    """
    task = _get_task_or_404(db, task_id)
    require_permission(db, Operation.TASK_UPDATE, ctx, task.project_id)

    updates = {}
    if title is not _UNSET:
        if not title or not str(title).strip():
            raise ValidationError("Task title cannot be empty")
        updates["title"] = str(title).strip()
    if description is not _UNSET:
        updates["description"] = (description or "").strip() or None
    if assigned_to is not _UNSET:
        if assigned_to is None:
            raise ValidationError("Assigned user is required")
        if not db.query(User.id).filter(User.id == assigned_to).first():
            raise NotFoundError("Assigned user not found")
        if not _is_project_member(db, task.project_id, assigned_to):
            # Membership is only enforced when creating a task unless the flag is on.
            if settings.TASK_REASSIGN_REQUIRE_MEMBERSHIP:
                raise ValidationError("Assigned user must be a member of this project")
            logger.warning(
                "Task %s reassigned to %s, who is not a member of project %s",
                task.id,
                assigned_to,
                task.project_id,
            )
        updates["assigned_to"] = assigned_to
    if status is not _UNSET:
        value = status.value if isinstance(status, TaskStatus) else status
        if value not in VALID_STATUSES:
            raise ValidationError("Invalid status. Must be 'pending', 'in_progress', or 'completed'")
        updates["status"] = value

    if not updates:
        raise NoFieldsError()

    previous_assignee = task.assigned_to
    for field, value in updates.items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    logger.info("Task %s updated fields %s", task.id, sorted(updates))

    result = _serialize_loaded(task)
    if "assigned_to" in updates and task.assigned_to != previous_assignee:
        notification_service.safe_notify(
            db,
            notification_service.notify_task_assigned,
            task.assigned_to,
            task.project,
            task.title,
        )
    return result


def delete_task(db: Session, ctx: AuthContext, task_id: UUID) -> None:
    task = _get_task_or_404(db, task_id)
    require_permission(db, Operation.TASK_DELETE, ctx, task.project_id)

    db.delete(task)
    db.commit()
    logger.info("Task %s deleted by %s", task_id, ctx.user_id)
