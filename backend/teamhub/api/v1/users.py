from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamhub.api.deps import get_auth_context
from teamhub.core.auth_context import AuthContext
from teamhub.core.exceptions import NotFoundError
from teamhub.database import get_db
from teamhub.schemas.user import UserCreate, UserRead
from teamhub.services import user_directory

router = APIRouter()


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_directory.register_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    return UserRead.model_validate(user)


@router.get("/users/me", response_model=UserRead)
def read_current_user(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    user = user_directory.find_by_id(db, ctx.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserRead.model_validate(user)
