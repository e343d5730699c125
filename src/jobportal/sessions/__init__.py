"""Server-side sessions."""

from jobportal.sessions.session import Session
from jobportal.sessions.signing import sign, unsign
from jobportal.sessions.store import (
    DatabaseSessionStore,
    MemorySessionStore,
    SessionRecord,
    SessionStore,
)

__all__ = [
    "DatabaseSessionStore",
    "MemorySessionStore",
    "Session",
    "SessionRecord",
    "SessionStore",
    "sign",
    "unsign",
]
