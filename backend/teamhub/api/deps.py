from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamhub.core.auth_context import AuthContext
from teamhub.core.config import settings
from teamhub.database import get_db
from teamhub.services import user_directory


def get_auth_context(request: Request, db: Session = Depends(get_db)) -> AuthContext:
    """Resolve the caller from the identity header set by the upstream authenticator."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate caller identity",
    )

    raw_user_id = request.headers.get(settings.USER_ID_HEADER)
    if not raw_user_id:
        raise credentials_exception
    try:
        user_id = UUID(raw_user_id)
    except ValueError:
        raise credentials_exception

    try:
        user = user_directory.find_by_id(db, user_id)
    except SQLAlchemyError:
        # Surface a clearer error if the DB is not reachable instead of a generic 500
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable while resolving caller",
        )

    if user is None:
        raise credentials_exception

    return AuthContext.for_user(user)
