from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hireline.core.exceptions import AccessDeniedError, NotFoundError
from hireline.database import get_db
from hireline.models.job import Job
from hireline.models.user import User
from hireline.routers.auth_deps import get_current_user, require_recruiter
from hireline.schemas.job import JobCreate, JobResponse, JobUpdate

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
)


@router.post("/", response_model=JobResponse, status_code=201)
def create_job(
    job_in: JobCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    """Create a new job posting owned by the calling recruiter."""
    db_job = Job(**job_in.model_dump(), recruiter_id=current_user.id)
    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    return db_job


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Job).order_by(Job.id.desc()).offset(skip).limit(limit).all()


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_in: JobUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    """
    Edit a posting. Analyses keep the description snapshot taken when they ran.
    """
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if job.recruiter_id != current_user.id:
        raise AccessDeniedError("Not authorized to edit this job")

    for field, value in job_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(job, field, value)
    db.commit()
    db.refresh(job)
    return job
