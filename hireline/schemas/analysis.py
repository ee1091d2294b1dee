from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

# --- CANONICAL FEEDBACK ---

class FeedbackSummary(BaseModel):
    overallMatch: str
    briefAssessment: str

class KeySkills(BaseModel):
    present: List[str]
    missing: List[str]

class ExperienceAnalysis(BaseModel):
    relevantExperience: List[str]
    gaps: List[str]

class EducationFit(BaseModel):
    match: str
    details: str

class KeywordMatch(BaseModel):
    score: str
    missingKeywords: List[str]

class Feedback(BaseModel):
    """Typed view of the canonical feedback object persisted with every analysis."""
    summary: FeedbackSummary
    keySkills: KeySkills
    experienceAnalysis: ExperienceAnalysis
    educationFit: EducationFit
    strengths: List[str]
    weaknesses: List[str]
    improvementSuggestions: List[str]
    keywordMatch: KeywordMatch
    formattingFeedback: str

# --- REQUEST / RESPONSE ---

class AnalyzeRequest(BaseModel):
    # Identifiers reach the pipeline untouched so malformed ones map to 400
    model_config = ConfigDict(populate_by_name=True)

    job_id: Any = Field(default=None, alias="jobId")
    job_description: Optional[str] = Field(default=None, alias="jobDescription")
    application_id: Any = Field(default=None, alias="applicationId")

class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    analysis_id: int = Field(serialization_alias="analysisId")
    feedback: Feedback
    degraded: bool = False

class AnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    resume_id: Optional[int]
    job_id: Optional[int]
    job_description: Optional[str]
    score: Optional[float]
    applicant_id: Optional[int]
    normalization_status: str
    created_at: Optional[datetime] = None
    feedback: Dict[str, Any] = Field(validation_alias="feedback_data")
