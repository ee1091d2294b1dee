from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class JobCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: Optional[str] = None

class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None

class JobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    company: str
    location: Optional[str]
    recruiter_id: int
    created_at: Optional[datetime] = None
