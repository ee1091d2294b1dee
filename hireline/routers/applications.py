import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hireline.core.exceptions import AccessDeniedError, ConflictError, NotFoundError
from hireline.database import get_db
from hireline.models.application import Application
from hireline.models.job import Job
from hireline.models.resume import Resume
from hireline.models.user import User
from hireline.routers.auth_deps import get_current_user, require_candidate, require_recruiter
from hireline.schemas.application import ApplicationDetail, ApplicationResponse, ApplicationStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
)


def _get_application(db: Session, application_id: int) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


@router.post("/apply/{job_id}", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply_for_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_candidate),
):
    """Apply with the candidate's most recent resume. One application per job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")

    existing = db.query(Application).filter(
        Application.job_id == job_id,
        Application.applicant_id == current_user.id,
    ).first()
    if existing:
        raise ConflictError("You have already applied for this job")

    resume = (
        db.query(Resume)
        .filter(Resume.owner_id == current_user.id)
        .order_by(Resume.id.desc())
        .first()
    )
    if not resume:
        raise NotFoundError("Please upload a resume before applying")

    application = Application(job_id=job_id, applicant_id=current_user.id, resume_id=resume.id)
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already applied for this job")
    db.refresh(application)
    logger.info(f"User {current_user.id} applied for job {job_id} with resume {resume.id}")
    return application


@router.get("/applicant/me", response_model=List[ApplicationDetail])
def list_my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_candidate),
):
    return (
        db.query(Application)
        .filter(Application.applicant_id == current_user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


@router.get("/recruiter/me", response_model=List[ApplicationDetail])
def list_recruiter_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    return (
        db.query(Application)
        .join(Job)
        .filter(Job.recruiter_id == current_user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


@router.get("/{application_id}", response_model=ApplicationDetail)
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = _get_application(db, application_id)
    if current_user.id not in (application.applicant_id, application.job.recruiter_id):
        raise AccessDeniedError("Not authorized to view this application")
    return application


@router.put("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    application = _get_application(db, application_id)
    if application.job.recruiter_id != current_user.id:
        raise AccessDeniedError("Not authorized to update this application")

    application.status = update.status
    db.commit()
    db.refresh(application)
    logger.info(f"Application {application_id} moved to {update.status.value}")
    return application


@router.delete("/{application_id}")
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = _get_application(db, application_id)
    if application.applicant_id != current_user.id:
        raise AccessDeniedError("Not authorized to delete this application")
    db.delete(application)
    db.commit()
    return {"success": True, "message": "Application cancelled successfully"}
