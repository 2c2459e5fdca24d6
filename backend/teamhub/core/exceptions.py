"""Typed failures raised by the service layer.

Each error carries the HTTP status the API layer answers with; services never
import FastAPI and routers never build these messages themselves.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for every expected failure of a service operation."""

    status_code = 500
    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid input"


class NoFieldsError(ValidationError):
    """An update was requested without any field to change."""

    default_message = "No fields to update"


class BadRequestError(ValidationError):
    """Well-formed input the operation refuses, such as a self-invite."""

    default_message = "Bad request"


class ForbiddenError(ServiceError):
    """The caller lacks the role or relationship the operation requires."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(ServiceError):
    """The entity does not exist, or is not in the state the caller expects."""

    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    """The operation would break a uniqueness rule."""

    status_code = 409
    default_message = "Conflict"
