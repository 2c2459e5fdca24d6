"""User lookup and registration used by the transport layer and invitations."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teamhub.core.exceptions import ConflictError, ValidationError
from teamhub.core.security import hash_password, password_matches
from teamhub.models import User

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 25
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 50


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str) -> str:
    return (username or "").strip().lower()


def register_user(db: Session, *, username: str, email: str, password: str) -> User:
    username = normalize_username(username)
    email = normalize_email(email)

    if not username or not email or not password:
        raise ValidationError("All fields are required")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username must be between 1 and {USERNAME_MAX_LENGTH} characters")
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )

    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("Email already registered")
    if db.query(User.id).filter(User.username == username).first():
        raise ConflictError("Username already taken")

    user = User(username=username, email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email or username already registered") from exc
    db.refresh(user)

    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def find_by_email(db: Session, email: str) -> Optional[User]:
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.query(User).filter(User.email == normalized).first()


def find_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def verify_password(user: User, password: str) -> bool:
    if not user or not password:
        return False
    return password_matches(password, user.password_hash)
