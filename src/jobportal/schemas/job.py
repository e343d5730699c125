"""Job-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class JobStatus(str, Enum):
    """Job posting status enumeration."""

    OPEN = "open"
    CLOSED = "closed"


class JobCreate(BaseModel):
    """Schema for publishing a job."""

    title: str = Field(min_length=1, max_length=200)
    company: str = Field(min_length=1, max_length=200)
    location: str | None = None
    description: str = ""
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    salary_currency: str = Field(default="USD", min_length=3, max_length=3)

    @model_validator(mode="after")
    def check_salary_range(self) -> "JobCreate":
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min must not exceed salary_max")
        return self


class StatusUpdate(BaseModel):
    """Schema for updating a job's status."""

    status: JobStatus


class SalaryInfo(BaseModel):
    """Salary information schema."""

    min: int | None
    max: int | None
    currency: str


class JobListItem(BaseModel):
    """Schema for job list item (summary view)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company: str
    title: str
    location: str | None
    salary_range: str | None
    created_at: datetime
    applications_count: int
    status: JobStatus


class JobDetail(BaseModel):
    """Schema for detailed job view."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employer_id: int
    company: str
    title: str
    location: str | None
    description: str
    salary: SalaryInfo
    created_at: datetime
    status: JobStatus
