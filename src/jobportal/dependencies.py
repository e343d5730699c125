"""FastAPI dependencies exposing pipeline state to route collaborators."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session as DBSession

from jobportal.config import PipelineConfig
from jobportal.database import get_db
from jobportal.models.user import User
from jobportal.pipeline.context import RequestContext
from jobportal.sessions.session import Session


def get_context(request: Request) -> RequestContext:
    """
    Return the context built by the pipeline for this request.

    Raises:
        RuntimeError: If the app is served without the pipeline middleware
    """
    context = getattr(request.state, "context", None)
    if context is None:
        raise RuntimeError("Request did not pass through the request pipeline")
    return context


def get_session(context: RequestContext = Depends(get_context)) -> Session:
    if context.session is None:
        raise RuntimeError("Session stage is not mounted")
    return context.session


def get_pipeline_config(request: Request) -> PipelineConfig:
    return request.app.state.pipeline_config


def get_current_user_id(context: RequestContext = Depends(get_context)) -> int:
    """
    Require an authenticated caller.

    Raises:
        HTTPException 401: If the session carries no user
    """
    if not context.auth.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return context.auth.user_id


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
) -> User:
    """
    Load the authenticated user.

    Raises:
        HTTPException 401: If the session points at a user that no longer exists
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
