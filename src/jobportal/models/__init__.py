"""Database models package."""

from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.session_record import SessionRecordRow
from jobportal.models.user import User

__all__ = ["Application", "Job", "SessionRecordRow", "User"]
