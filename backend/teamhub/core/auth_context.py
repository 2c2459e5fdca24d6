"""
Authentication context passed into every service operation.

The transport layer resolves the caller (see ``teamhub.api.deps``) and hands
the resulting context to the core. Services read the caller identity from
here only, never from request state.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthContext(BaseModel):
    """Immutable identity of the caller of a service operation."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    username: str
    email: str

    @classmethod
    def for_user(cls, user) -> "AuthContext":
        return cls(user_id=user.id, username=user.username, email=user.email)
