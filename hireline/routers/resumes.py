import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from hireline.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ResumeFileNotFoundError,
)
from hireline.core.limiter import limiter
from hireline.database import get_db
from hireline.models.application import Application
from hireline.models.resume import Resume
from hireline.models.user import User, UserRole
from hireline.routers.auth_deps import get_current_user, require_candidate, require_recruiter
from hireline.schemas.resume import ResumeCommentUpdate, ResumeResponse
from hireline.services import resume_store
from hireline.services.text_extraction import resolve_resume_path

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/resumes",
    tags=["Resumes"],
)


def _get_resume(db: Session, resume_id: int) -> Resume:
    resume = db.query(Resume).filter(Resume.id == resume_id).first()
    if not resume:
        raise NotFoundError("Resume not found")
    return resume


def _ensure_can_read(resume: Resume, user: User) -> None:
    if user.role == UserRole.CANDIDATE and resume.owner_id != user.id:
        raise AccessDeniedError("Not authorized to access this resume")


@router.post("/upload", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_candidate),
):
    stored_name = resume_store.save_upload(file)
    resume = Resume(owner_id=current_user.id, file_path=stored_name, title=title or file.filename)
    db.add(resume)
    try:
        db.commit()
    except Exception:
        db.rollback()
        resume_store.release_file(stored_name)
        raise
    db.refresh(resume)
    return resume


@router.get("/", response_model=List[ResumeResponse])
def list_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    return db.query(Resume).order_by(Resume.id.desc()).all()


@router.get("/user/me", response_model=List[ResumeResponse])
def list_my_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Resume).filter(Resume.owner_id == current_user.id).order_by(Resume.id.desc()).all()


@router.get("/recruiter/me", response_model=List[ResumeResponse])
def list_reviewed_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    """Resumes this recruiter has commented on."""
    return db.query(Resume).filter(Resume.recruiter_id == current_user.id).order_by(Resume.id.desc()).all()


@router.get("/download/{resume_id}")
def download_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resume = _get_resume(db, resume_id)
    _ensure_can_read(resume, current_user)
    if not resume.file_path:
        raise NotFoundError("No file associated with this resume")
    path = resolve_resume_path(resume.file_path)
    if not os.path.isfile(path):
        raise ResumeFileNotFoundError(path)
    return FileResponse(path, filename=resume.file_path)


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resume = _get_resume(db, resume_id)
    _ensure_can_read(resume, current_user)
    return resume


@router.put("/{resume_id}/file", response_model=ResumeResponse)
@limiter.limit("10/minute")
def replace_resume_file(
    request: Request,
    resume_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_candidate),
):
    """Re-upload: the resume points at the new file and the old one is released."""
    resume = _get_resume(db, resume_id)
    if resume.owner_id != current_user.id:
        raise AccessDeniedError("Not authorized to update this resume")

    stored_name = resume_store.save_upload(file)
    old_file = resume.file_path
    resume.file_path = stored_name
    try:
        db.commit()
    except Exception:
        db.rollback()
        resume_store.release_file(stored_name)
        raise
    resume_store.release_file(old_file)
    db.refresh(resume)
    return resume


@router.put("/{resume_id}", response_model=ResumeResponse)
def update_resume(
    resume_id: int,
    update: ResumeCommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Recruiters leave a comment; owners may retitle their resume."""
    resume = _get_resume(db, resume_id)
    if current_user.role == UserRole.RECRUITER:
        if update.comment is not None:
            resume.comment = update.comment
            resume.recruiter_id = current_user.id
    elif resume.owner_id == current_user.id:
        if update.title is not None:
            resume.title = update.title
    else:
        raise AccessDeniedError("Not authorized to update this resume")
    db.commit()
    db.refresh(resume)
    return resume


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resume = _get_resume(db, resume_id)
    if resume.owner_id != current_user.id:
        raise AccessDeniedError("Not authorized to delete this resume")
    if db.query(Application).filter(Application.resume_id == resume.id).first():
        raise ConflictError("Resume is attached to an application and cannot be deleted")

    file_path = resume.file_path
    db.delete(resume)
    db.commit()
    resume_store.release_file(file_path)
    logger.info(f"Resume {resume_id} deleted by user {current_user.id}")
    return {"success": True, "message": "Resume deleted successfully"}
