from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from hireline.models.application import ApplicationStatus
from hireline.schemas.job import JobResponse
from hireline.schemas.resume import ResumeResponse

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_id: int
    job_id: int
    resume_id: int
    status: ApplicationStatus
    analysis_id: Optional[int] = None
    created_at: Optional[datetime] = None

class ApplicationDetail(ApplicationResponse):
    job: Optional[JobResponse] = None
    resume: Optional[ResumeResponse] = None
