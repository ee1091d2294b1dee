from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hireline.core.exceptions import NotFoundError
from hireline.database import get_db
from hireline.models.resume import Resume
from hireline.models.review import Review
from hireline.models.user import User
from hireline.routers.auth_deps import get_current_user, require_recruiter
from hireline.schemas.review import ReviewCreate, ReviewResponse

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
)


@router.post("/{resume_id}", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    resume_id: int,
    review_in: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_recruiter),
):
    if not db.query(Resume).filter(Resume.id == resume_id).first():
        raise NotFoundError("Resume not found")
    review = Review(resume_id=resume_id, reviewer_id=current_user.id, comment=review_in.comment)
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


@router.get("/{resume_id}", response_model=List[ReviewResponse])
def get_reviews(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Review).filter(Review.resume_id == resume_id).order_by(Review.id).all()
