"""Server-side session storage model."""

from sqlalchemy import JSON, Column, DateTime, String

from jobportal.database import Base


class SessionRecordRow(Base):
    """
    Persisted session state keyed by the id carried in the session cookie.

    Attributes:
        sid: Session identifier (primary key)
        data: JSON session payload
        expires_at: Naive UTC expiry; rows past it are treated as absent
    """

    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    expires_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation of SessionRecordRow."""
        return f"<SessionRecordRow(sid='{self.sid}', expires_at={self.expires_at})>"
