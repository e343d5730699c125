"""Jobs API router - list, detail, publish, status update and delete endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobportal.database import get_db
from jobportal.dependencies import get_current_user
from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.job import (
    JobCreate,
    JobDetail,
    JobListItem,
    JobStatus,
    SalaryInfo,
    StatusUpdate,
)
from jobportal.schemas.user import UserRole

router = APIRouter(tags=["jobs"])


def _build_salary_range(job: Job) -> str | None:
    """
    Build a human-readable salary range string from a Job record.

    Args:
        job: Job ORM instance

    Returns:
        Formatted salary string, or None if no salary info is present
    """
    if not job.salary_min and not job.salary_max:
        return None
    currency = job.salary_currency or "USD"
    symbol = "$" if currency == "USD" else ""
    if job.salary_min and job.salary_max:
        return f"{symbol}{job.salary_min:,} - {symbol}{job.salary_max:,} {currency}"
    elif job.salary_min:
        return f"{symbol}{job.salary_min:,}+ {currency}"
    else:
        return f"Up to {symbol}{job.salary_max:,} {currency}"


def _to_list_item(job: Job, applications_count: int) -> JobListItem:
    return JobListItem(
        id=job.id,
        company=job.company,
        title=job.title,
        location=job.location,
        salary_range=_build_salary_range(job),
        created_at=job.created_at,
        applications_count=applications_count,
        status=JobStatus(job.status),
    )


def _to_detail(job: Job) -> JobDetail:
    return JobDetail(
        id=job.id,
        employer_id=job.employer_id,
        company=job.company,
        title=job.title,
        location=job.location,
        description=job.description or "",
        salary=SalaryInfo(
            min=job.salary_min,
            max=job.salary_max,
            currency=job.salary_currency or "USD",
        ),
        created_at=job.created_at,
        status=JobStatus(job.status),
    )


def _get_owned_job(db: Session, job_id: int, user: User) -> Job:
    """
    Load a job the current user published.

    Raises:
        HTTPException 404: If the job is not found.
        HTTPException 403: If the job belongs to another employer.
    """
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.employer_id != user.id:
        raise HTTPException(status_code=403, detail="Not your job posting")
    return job


@router.get("", response_model=list[JobListItem])
def list_jobs(status: JobStatus | None = None, db: Session = Depends(get_db)) -> list[JobListItem]:
    """
    List published jobs.

    Args:
        status: Optional status filter.

    Returns:
        List of job summaries, newest first.
    """
    counts = (
        db.query(
            Application.job_id,
            func.count(Application.id).label("applications_count"),
        )
        .group_by(Application.job_id)
        .subquery()
    )
    query = db.query(Job, func.coalesce(counts.c.applications_count, 0)).outerjoin(
        counts, counts.c.job_id == Job.id
    )
    if status is not None:
        query = query.filter(Job.status == status.value)
    rows = query.order_by(Job.created_at.desc(), Job.id.desc()).all()
    return [_to_list_item(job, count) for job, count in rows]


@router.get("/{job_id}", response_model=JobDetail)
def get_job(job_id: int, db: Session = Depends(get_db)) -> JobDetail:
    """
    Get detailed information for a specific job.

    Raises:
        HTTPException 404: If the job is not found.
    """
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return _to_detail(job)


@router.post("", response_model=JobDetail, status_code=201)
def create_job(
    payload: JobCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> JobDetail:
    """
    Publish a job posting.

    Raises:
        HTTPException 403: If the caller is not an employer.
    """
    if user.role != UserRole.EMPLOYER.value:
        raise HTTPException(status_code=403, detail="Only employers can post jobs")

    job = Job(
        employer_id=user.id,
        title=payload.title.strip(),
        company=payload.company.strip(),
        location=payload.location,
        description=payload.description,
        salary_min=payload.salary_min,
        salary_max=payload.salary_max,
        salary_currency=payload.salary_currency.upper(),
        status=JobStatus.OPEN.value,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return _to_detail(job)


@router.patch("/{job_id}/status", response_model=JobDetail)
def update_job_status(
    job_id: int,
    status_update: StatusUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> JobDetail:
    """Open or close one of the caller's job postings."""
    job = _get_owned_job(db, job_id, user)
    job.status = status_update.status.value
    db.commit()
    db.refresh(job)
    return _to_detail(job)


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    """Delete one of the caller's job postings together with its applications."""
    job = _get_owned_job(db, job_id, user)
    db.query(Application).filter(Application.job_id == job.id).delete()
    db.delete(job)
    db.commit()
    return Response(status_code=204)
