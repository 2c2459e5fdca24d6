"""
Pytest configuration and fixtures for service and API tests.

Runs against an in-memory SQLite database with foreign keys enforced; the
schema is rebuilt for every test.
"""

import os
import uuid
from typing import Generator

# Must be set before teamhub.core.config builds its cached settings
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy.orm import Session

from teamhub.core.auth_context import AuthContext
from teamhub.database import Base, SessionLocal, engine
from teamhub.models import Project, ProjectMember, ProjectRole, User


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh schema and a database session for one test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db: Session, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=f"{username}@example.com",
        password_hash="test_hash_123",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ctx_for(user: User) -> AuthContext:
    return AuthContext.for_user(user)


def add_member(db: Session, project: Project, user: User, role: ProjectRole = ProjectRole.TEAM_MEMBER) -> ProjectMember:
    membership = ProjectMember(project_id=project.id, user_id=user.id, role=role)
    db.add(membership)
    db.commit()
    return membership


@pytest.fixture
def alice(db: Session) -> User:
    return make_user(db, "alice")


@pytest.fixture
def bob(db: Session) -> User:
    return make_user(db, "bob")


@pytest.fixture
def carol(db: Session) -> User:
    return make_user(db, "carol")


@pytest.fixture
def alice_ctx(alice) -> AuthContext:
    return ctx_for(alice)


@pytest.fixture
def bob_ctx(bob) -> AuthContext:
    return ctx_for(bob)


@pytest.fixture
def carol_ctx(carol) -> AuthContext:
    return ctx_for(carol)


@pytest.fixture
def project(db: Session, alice) -> Project:
    """Project 'Alpha' with alice as its only team lead."""
    project = Project(id=uuid.uuid4(), name="Alpha", description="First project", created_by=alice.id)
    db.add(project)
    db.flush()
    db.add(ProjectMember(project_id=project.id, user_id=alice.id, role=ProjectRole.TEAM_LEAD))
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def project_with_bob(db: Session, project, bob) -> Project:
    """Alpha with bob as a plain team member."""
    add_member(db, project, bob)
    return project
