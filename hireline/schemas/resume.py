from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class ResumeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    file_path: Optional[str]
    title: Optional[str]
    comment: Optional[str]
    recruiter_id: Optional[int] = None
    created_at: Optional[datetime] = None

class ResumeCommentUpdate(BaseModel):
    comment: Optional[str] = None
    title: Optional[str] = None
