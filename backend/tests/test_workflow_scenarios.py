"""End-to-end collaboration scenarios across the services."""

import pytest

from teamhub.core.exceptions import ForbiddenError, NotFoundError
from teamhub.models import InvitationStatus, ProjectRole, TaskStatus
from teamhub.services import invitation_service, notification_service, project_service, task_service


def test_alpha_project_lifecycle(db, alice, bob, alice_ctx, bob_ctx):
    project = project_service.create_project(db, alice_ctx, name="Alpha")

    invitation = invitation_service.send_invitation(
        db, alice_ctx, project_id=project.id, invitee_email=bob.email
    )
    assert notification_service.unread_count(db, bob_ctx) == 1

    invitation_service.accept_invitation(db, bob_ctx, invitation.id)
    members = project_service.get_members(db, project.id)
    assert [(m.username, m.role) for m in members] == [
        ("alice", ProjectRole.TEAM_LEAD),
        ("bob", ProjectRole.TEAM_MEMBER),
    ]

    task = task_service.create_task(
        db, alice_ctx, project_id=project.id, assigned_to=bob.id, title="Write spec"
    )
    assert notification_service.unread_count(db, bob_ctx) == 2

    with pytest.raises(ForbiddenError):
        task_service.set_completion(db, alice_ctx, task.id, True)

    done = task_service.set_completion(db, bob_ctx, task.id, True)
    assert done.status == TaskStatus.COMPLETED.value
    assert done.completed_at is not None

    with pytest.raises(ForbiddenError):
        project_service.leave_project(db, alice_ctx, project.id)

    project_service.assign_team_lead(db, alice_ctx, project.id, bob.id)
    with pytest.raises(ForbiddenError):
        project_service.leave_project(db, alice_ctx, project.id)
    project_service.remove_member(db, bob_ctx, project.id, alice.id)

    members = project_service.get_members(db, project.id)
    assert [(m.username, m.role) for m in members] == [("bob", ProjectRole.TEAM_LEAD)]
    assert [p.name for p in project_service.list_projects_for_user(db, alice_ctx)] == []


def test_cancelled_invitation_cannot_be_accepted(db, alice, bob, alice_ctx, bob_ctx):
    project = project_service.create_project(db, alice_ctx, name="Alpha")
    invitation = invitation_service.send_invitation(
        db, alice_ctx, project_id=project.id, invitee_email=bob.email
    )

    cancelled = invitation_service.cancel_invitation(db, alice_ctx, invitation.id)
    assert cancelled.status == InvitationStatus.REJECTED

    with pytest.raises(NotFoundError):
        invitation_service.accept_invitation(db, bob_ctx, invitation.id)
    assert project_service.is_member(db, project.id, bob.id) is False

    again = invitation_service.send_invitation(
        db, alice_ctx, project_id=project.id, invitee_email=bob.email
    )
    invitation_service.accept_invitation(db, bob_ctx, again.id)
    assert project_service.is_member(db, project.id, bob.id) is True
