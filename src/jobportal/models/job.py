"""Job posting database model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from jobportal.database import Base


class Job(Base):
    """
    Job model representing an opening published by an employer.

    Attributes:
        id: Primary key
        employer_id: Foreign key to the posting user
        title: Job title
        company: Company name shown on the posting
        location: Free-form location (or None)
        description: Posting body
        salary_min: Minimum salary
        salary_max: Maximum salary
        salary_currency: Currency code (default: USD)
        status: 'open' or 'closed'
        created_at: Timestamp when record was created
    """

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=False, default="")
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String, default="USD", nullable=False)
    status = Column(String, default="open", nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of Job."""
        return f"<Job(id={self.id}, title='{self.title}', employer_id={self.employer_id})>"
