"""Tests for the invitation workflow."""

import uuid

import pytest
from sqlalchemy import event
from sqlalchemy.sql.dml import Insert

from teamhub.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from teamhub.database import engine, utcnow
from teamhub.models import Invitation, InvitationStatus, Notification, ProjectMember, ProjectRole
from teamhub.schemas.invitation import InvitationDirection
from teamhub.services import invitation_service, project_service
from teamhub.services.invitation_service import NOT_FOUND_OR_PROCESSED


@pytest.fixture
def invitation(db, project, alice_ctx, bob):
    return invitation_service.send_invitation(
        db, alice_ctx, project_id=project.id, invitee_email=bob.email, message="Join us"
    )


class TestSendInvitation:

    def test_send_creates_pending_invitation_and_notification(self, db, project, alice, bob, invitation):
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.inviter_id == alice.id
        assert invitation.invitee_id == bob.id
        assert invitation.project_name == "Alpha"
        assert invitation.counterpart_username == "bob"

        notification = db.query(Notification).filter(Notification.user_id == bob.id).one()
        assert notification.type == "invitation"
        assert notification.related_invitation_id == invitation.id
        assert "alice" in notification.message

    def test_email_lookup_is_case_insensitive(self, db, project, alice_ctx, bob):
        result = invitation_service.send_invitation(
            db, alice_ctx, project_id=project.id, invitee_email="BOB@Example.com"
        )
        assert result.invitee_id == bob.id

    def test_unknown_project(self, db, alice_ctx, bob):
        with pytest.raises(NotFoundError):
            invitation_service.send_invitation(db, alice_ctx, project_id=uuid.uuid4(), invitee_email=bob.email)

    def test_member_cannot_invite(self, db, project_with_bob, bob_ctx, carol):
        with pytest.raises(ForbiddenError) as excinfo:
            invitation_service.send_invitation(
                db, bob_ctx, project_id=project_with_bob.id, invitee_email=carol.email
            )
        assert excinfo.value.message == "Only team leads can send invitations"

    def test_unknown_invitee(self, db, project, alice_ctx):
        with pytest.raises(NotFoundError):
            invitation_service.send_invitation(
                db, alice_ctx, project_id=project.id, invitee_email="ghost@example.com"
            )

    def test_self_invite(self, db, project, alice, alice_ctx):
        with pytest.raises(BadRequestError):
            invitation_service.send_invitation(db, alice_ctx, project_id=project.id, invitee_email=alice.email)

    def test_existing_member(self, db, project_with_bob, alice_ctx, bob):
        with pytest.raises(ConflictError):
            invitation_service.send_invitation(
                db, alice_ctx, project_id=project_with_bob.id, invitee_email=bob.email
            )

    def test_duplicate_pending(self, db, project, alice_ctx, bob, invitation):
        with pytest.raises(ConflictError):
            invitation_service.send_invitation(db, alice_ctx, project_id=project.id, invitee_email=bob.email)
        assert db.query(Invitation).count() == 1

    def test_reinvite_after_reject(self, db, project, alice_ctx, bob, bob_ctx, invitation):
        invitation_service.reject_invitation(db, bob_ctx, invitation.id)
        again = invitation_service.send_invitation(db, alice_ctx, project_id=project.id, invitee_email=bob.email)
        assert again.id != invitation.id
        assert again.status == InvitationStatus.PENDING


class TestRespond:

    def test_accept_adds_team_member(self, db, project, bob, bob_ctx, invitation):
        accepted = invitation_service.accept_invitation(db, bob_ctx, invitation.id)

        assert accepted.status == InvitationStatus.ACCEPTED
        assert accepted.responded_at is not None
        membership = (
            db.query(ProjectMember)
            .filter(ProjectMember.project_id == project.id, ProjectMember.user_id == bob.id)
            .one()
        )
        assert membership.role == ProjectRole.TEAM_MEMBER

    def test_accept_twice(self, db, bob, bob_ctx, invitation):
        invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        with pytest.raises(NotFoundError) as excinfo:
            invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        assert excinfo.value.message == NOT_FOUND_OR_PROCESSED
        assert db.query(ProjectMember).filter_by(user_id=bob.id).count() == 1

    def test_only_invitee_can_accept(self, db, alice_ctx, carol_ctx, invitation):
        for ctx in (alice_ctx, carol_ctx):
            with pytest.raises(NotFoundError):
                invitation_service.accept_invitation(db, ctx, invitation.id)

    def test_accept_when_already_member_does_not_duplicate(self, db, project, bob, bob_ctx, invitation):
        db.add(ProjectMember(project_id=project.id, user_id=bob.id, role=ProjectRole.TEAM_MEMBER))
        db.commit()

        invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        assert project_service.get_members(db, project.id)[1].username == "bob"
        assert db.query(ProjectMember).filter(ProjectMember.user_id == bob.id).count() == 1

    def test_accept_second_pending_invitation(self, db, project, alice, bob, bob_ctx, invitation):
        duplicate = Invitation(project_id=project.id, inviter_id=alice.id, invitee_id=bob.id)
        db.add(duplicate)
        db.commit()

        invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        accepted = invitation_service.accept_invitation(db, bob_ctx, duplicate.id)

        assert accepted.status == InvitationStatus.ACCEPTED
        assert db.query(ProjectMember).filter_by(project_id=project.id, user_id=bob.id).count() == 1

    def test_accept_ignores_membership_added_concurrently(self, db, project, bob, bob_ctx, invitation):
        inserted = []

        def add_membership_first(conn, clauseelement, multiparams, params, execution_options):
            if inserted or not isinstance(clauseelement, Insert):
                return
            if clauseelement.table.name != "project_members":
                return
            inserted.append(True)
            conn.execute(
                ProjectMember.__table__.insert().values(
                    id=uuid.uuid4(),
                    project_id=project.id,
                    user_id=bob.id,
                    role=ProjectRole.TEAM_MEMBER,
                    joined_at=utcnow(),
                )
            )

        event.listen(engine, "before_execute", add_membership_first)
        try:
            accepted = invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        finally:
            event.remove(engine, "before_execute", add_membership_first)

        assert inserted
        assert accepted.status == InvitationStatus.ACCEPTED
        assert db.query(ProjectMember).filter_by(project_id=project.id, user_id=bob.id).count() == 1

    def test_reject(self, db, project, bob, bob_ctx, invitation):
        rejected = invitation_service.reject_invitation(db, bob_ctx, invitation.id)
        assert rejected.status == InvitationStatus.REJECTED
        assert rejected.responded_at is not None
        assert project_service.is_member(db, project.id, bob.id) is False

    def test_reject_after_accept(self, db, bob_ctx, invitation):
        invitation_service.accept_invitation(db, bob_ctx, invitation.id)
        with pytest.raises(NotFoundError):
            invitation_service.reject_invitation(db, bob_ctx, invitation.id)

    def test_cancel_by_inviter(self, db, alice_ctx, bob_ctx, invitation):
        cancelled = invitation_service.cancel_invitation(db, alice_ctx, invitation.id)
        assert cancelled.status == InvitationStatus.REJECTED

        with pytest.raises(NotFoundError):
            invitation_service.accept_invitation(db, bob_ctx, invitation.id)

    def test_invitee_cannot_cancel(self, db, bob_ctx, invitation):
        with pytest.raises(NotFoundError):
            invitation_service.cancel_invitation(db, bob_ctx, invitation.id)


class TestQueries:

    def test_get_visible_to_parties_only(self, db, alice_ctx, bob_ctx, carol_ctx, invitation):
        assert invitation_service.get_invitation(db, alice_ctx, invitation.id).id == invitation.id
        assert invitation_service.get_invitation(db, bob_ctx, invitation.id).id == invitation.id
        with pytest.raises(NotFoundError):
            invitation_service.get_invitation(db, carol_ctx, invitation.id)

    def test_received_and_sent_views(self, db, alice_ctx, bob_ctx, invitation):
        received = invitation_service.list_invitations(db, bob_ctx, InvitationDirection.RECEIVED)
        assert [i.id for i in received] == [invitation.id]
        assert received[0].counterpart_username == "alice"

        sent = invitation_service.list_invitations(db, alice_ctx, InvitationDirection.SENT)
        assert [i.id for i in sent] == [invitation.id]
        assert sent[0].counterpart_username == "bob"

        assert invitation_service.list_invitations(db, alice_ctx, InvitationDirection.RECEIVED) == []

    def test_pending_excludes_answered(self, db, bob_ctx, invitation):
        assert len(invitation_service.list_pending(db, bob_ctx)) == 1
        invitation_service.reject_invitation(db, bob_ctx, invitation.id)
        assert invitation_service.list_pending(db, bob_ctx) == []
        assert len(invitation_service.list_invitations(db, bob_ctx)) == 1
