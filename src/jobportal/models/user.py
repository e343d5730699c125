"""User database model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from jobportal.database import Base


class User(Base):
    """
    User model for job seekers and employers.

    Attributes:
        id: Primary key
        name: Display name
        email: Login email (unique, stored lowercase)
        password_hash: PBKDF2 hash in ``pbkdf2_sha256$iterations$salt$digest`` form
        role: Either 'seeker' or 'employer'
        created_at: Timestamp when record was created
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, default="seeker", nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
