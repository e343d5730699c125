"""Job application database model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from jobportal.database import Base


class Application(Base):
    """
    Application model linking a job seeker to a job.

    Attributes:
        id: Primary key
        job_id: Foreign key to jobs table
        applicant_id: Foreign key to users table
        cover_letter: Optional cover letter text
        resume_path: File name under the uploads directory (or None)
        status: pending, reviewed, accepted or rejected
        created_at: Timestamp when record was created
    """

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    resume_path = Column(String, nullable=True)
    status = Column(String, default="pending", nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # One application per seeker per job
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="_job_applicant_uc"),)

    def __repr__(self) -> str:
        """String representation of Application."""
        return (
            f"<Application(id={self.id}, job_id={self.job_id}, "
            f"applicant_id={self.applicant_id}, status='{self.status}')>"
        )
