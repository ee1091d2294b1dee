from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class ReviewCreate(BaseModel):
    comment: str = Field(min_length=1)

class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    resume_id: int
    reviewer_id: int
    comment: str
    created_at: Optional[datetime] = None
