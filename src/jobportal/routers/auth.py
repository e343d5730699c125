"""Auth API router - register, login, logout and session status."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session as DBSession

from jobportal.database import get_db
from jobportal.dependencies import get_context, get_session
from jobportal.models.user import User
from jobportal.pipeline.context import RequestContext
from jobportal.schemas.user import LoginRequest, SessionStatus, UserCreate
from jobportal.schemas.user import User as UserSchema
from jobportal.security import hash_password, verify_password
from jobportal.sessions.session import Session

router = APIRouter(tags=["auth"])


def _log_in(session: Session, user: User) -> None:
    session.regenerate()
    session["user_id"] = user.id
    session["role"] = user.role


@router.post("/register", response_model=UserSchema, status_code=201)
def register(
    payload: UserCreate,
    db: DBSession = Depends(get_db),
    session: Session = Depends(get_session),
) -> UserSchema:
    """
    Create an account and start a session for it.

    Raises:
        HTTPException 409: If the email is already registered.
    """
    email = payload.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        name=payload.name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _log_in(session, user)
    return UserSchema.model_validate(user)


@router.post("/login", response_model=UserSchema)
def login(
    payload: LoginRequest,
    db: DBSession = Depends(get_db),
    session: Session = Depends(get_session),
) -> UserSchema:
    """
    Authenticate with email and password.

    Raises:
        HTTPException 401: If the credentials don't match.
    """
    user = db.query(User).filter(User.email == payload.email.strip().lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    _log_in(session, user)
    return UserSchema.model_validate(user)


@router.post("/logout", status_code=204)
def logout(session: Session = Depends(get_session)) -> Response:
    """End the current session. Succeeds even without one."""
    session.destroy()
    return Response(status_code=204)


@router.get("/session", response_model=SessionStatus)
def session_status(
    context: RequestContext = Depends(get_context),
    db: DBSession = Depends(get_db),
) -> SessionStatus:
    """Report whether the caller is logged in, and as whom."""
    if not context.auth.is_authenticated:
        return SessionStatus(authenticated=False)
    user = db.query(User).filter(User.id == context.auth.user_id).first()
    if not user:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=UserSchema.model_validate(user))
