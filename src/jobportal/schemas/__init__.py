"""Pydantic schemas package."""

from jobportal.schemas.application import Application, ApplicationStatus, ApplicationStatusUpdate
from jobportal.schemas.job import (
    JobCreate,
    JobDetail,
    JobListItem,
    JobStatus,
    SalaryInfo,
    StatusUpdate,
)
from jobportal.schemas.user import (
    LoginRequest,
    PublicUser,
    SessionStatus,
    User,
    UserCreate,
    UserRole,
    UserUpdate,
)

__all__ = [
    "Application",
    "ApplicationStatus",
    "ApplicationStatusUpdate",
    "JobCreate",
    "JobDetail",
    "JobListItem",
    "JobStatus",
    "LoginRequest",
    "PublicUser",
    "SalaryInfo",
    "SessionStatus",
    "StatusUpdate",
    "User",
    "UserCreate",
    "UserRole",
    "UserUpdate",
]
