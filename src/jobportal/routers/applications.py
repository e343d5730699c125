"""Applications API router - apply, list, review and withdraw endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from jobportal.config import PipelineConfig
from jobportal.database import get_db
from jobportal.dependencies import get_current_user, get_pipeline_config
from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.application import Application as ApplicationSchema
from jobportal.schemas.application import ApplicationStatus, ApplicationStatusUpdate
from jobportal.schemas.job import JobStatus
from jobportal.schemas.user import UserRole
from jobportal.utils.file_storage import delete_upload, save_upload

router = APIRouter(tags=["applications"])

MAX_RESUME_BYTES = 5 * 1024 * 1024


def _to_schema(
    application: Application, job: Job, applicant: User, config: PipelineConfig
) -> ApplicationSchema:
    resume_url = None
    if application.resume_path:
        resume_url = f"{config.uploads_prefix.rstrip('/')}/{application.resume_path}"
    return ApplicationSchema(
        id=application.id,
        job_id=job.id,
        job_title=job.title,
        applicant_id=applicant.id,
        applicant_name=applicant.name,
        cover_letter=application.cover_letter,
        resume_url=resume_url,
        status=ApplicationStatus(application.status),
        created_at=application.created_at,
    )


@router.post("", response_model=ApplicationSchema, status_code=201)
def apply(
    job_id: int = Form(...),
    cover_letter: str | None = Form(default=None),
    resume: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> ApplicationSchema:
    """
    Apply to an open job, optionally attaching a resume.

    The resume is stored in the uploads directory and served back at
    ``/uploads/<stored name>``.

    Raises:
        HTTPException 403: If the caller is an employer.
        HTTPException 404: If the job does not exist or is closed.
        HTTPException 409: If the caller already applied.
        HTTPException 413: If the resume exceeds the size limit.
    """
    if user.role != UserRole.SEEKER.value:
        raise HTTPException(status_code=403, detail="Only job seekers can apply")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job or job.status != JobStatus.OPEN.value:
        raise HTTPException(status_code=404, detail="Job not found")

    existing = (
        db.query(Application)
        .filter(Application.job_id == job.id, Application.applicant_id == user.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="Already applied to this job")

    resume_path = None
    if resume is not None and resume.filename:
        content = resume.file.read(MAX_RESUME_BYTES + 1)
        if len(content) > MAX_RESUME_BYTES:
            raise HTTPException(status_code=413, detail="Resume too large")
        resume_path = save_upload(config.uploads_dir, resume.filename, content)

    application = Application(
        job_id=job.id,
        applicant_id=user.id,
        cover_letter=cover_letter,
        resume_path=resume_path,
        status=ApplicationStatus.PENDING.value,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return _to_schema(application, job, user, config)


@router.get("", response_model=list[ApplicationSchema])
def list_applications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> list[ApplicationSchema]:
    """
    List applications visible to the caller.

    Job seekers see their own applications; employers see applications to
    the jobs they published.
    """
    query = (
        db.query(Application, Job, User)
        .join(Job, Application.job_id == Job.id)
        .join(User, Application.applicant_id == User.id)
    )
    if user.role == UserRole.EMPLOYER.value:
        query = query.filter(Job.employer_id == user.id)
    else:
        query = query.filter(Application.applicant_id == user.id)
    rows = query.order_by(Application.created_at.desc(), Application.id.desc()).all()
    return [_to_schema(application, job, applicant, config) for application, job, applicant in rows]


@router.patch("/{application_id}/status", response_model=ApplicationSchema)
def update_application_status(
    application_id: int,
    status_update: ApplicationStatusUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> ApplicationSchema:
    """
    Review an application to one of the caller's jobs.

    Raises:
        HTTPException 404: If the application is not found.
        HTTPException 403: If the job belongs to another employer.
    """
    row = (
        db.query(Application, Job)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.id == application_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Application not found")
    application, job = row
    if job.employer_id != user.id:
        raise HTTPException(status_code=403, detail="Not an application to your job")

    application.status = status_update.status.value
    db.commit()
    db.refresh(application)
    applicant = db.query(User).filter(User.id == application.applicant_id).first()
    return _to_schema(application, job, applicant, config)


@router.delete("/{application_id}", status_code=204)
def withdraw_application(
    application_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> Response:
    """
    Withdraw one of the caller's applications and remove its resume.

    Raises:
        HTTPException 404: If the application is not the caller's.
    """
    application = (
        db.query(Application)
        .filter(Application.id == application_id, Application.applicant_id == user.id)
        .first()
    )
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    if application.resume_path:
        delete_upload(config.uploads_dir, application.resume_path)
    db.delete(application)
    db.commit()
    return Response(status_code=204)
