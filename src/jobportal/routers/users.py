"""Users API router - profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session as DBSession

from jobportal.database import get_db
from jobportal.dependencies import get_current_user
from jobportal.models.user import User
from jobportal.schemas.user import PublicUser, UserUpdate
from jobportal.schemas.user import User as UserSchema

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserSchema)
def read_me(user: User = Depends(get_current_user)) -> UserSchema:
    return UserSchema.model_validate(user)


@router.patch("/me", response_model=UserSchema)
def update_me(
    payload: UserUpdate,
    user: User = Depends(get_current_user),
    db: DBSession = Depends(get_db),
) -> UserSchema:
    """Update the current user's display name."""
    user.name = payload.name.strip()
    db.commit()
    db.refresh(user)
    return UserSchema.model_validate(user)


@router.get("/{user_id}", response_model=PublicUser)
def read_user(user_id: int, db: DBSession = Depends(get_db)) -> PublicUser:
    """
    Public profile of any user.

    Raises:
        HTTPException 404: If the user is not found.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return PublicUser.model_validate(user)
