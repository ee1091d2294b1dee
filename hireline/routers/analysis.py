from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from hireline.core.exceptions import AccessDeniedError
from hireline.core.limiter import limiter
from hireline.database import get_db
from hireline.models.user import User, UserRole
from hireline.routers.auth_deps import get_current_user
from hireline.schemas.analysis import AnalysisResponse, AnalyzeRequest, AnalyzeResponse
from hireline.services.analysis_service import AnalysisService, get_analysis, list_resume_analyses
from hireline.services.llm_client import LLMClient, get_llm_client

router = APIRouter(
    prefix="/analysis",
    tags=["Analysis"],
)


@router.post("/analyze/{resume_id}", response_model=AnalyzeResponse)
@limiter.limit("10/minute")
def analyze_resume(
    request: Request,
    resume_id: str,
    body: Optional[AnalyzeRequest] = Body(default=None),
    db: Session = Depends(get_db),
    llm_client: LLMClient = Depends(get_llm_client),
    current_user: User = Depends(get_current_user),
):
    """
    Run the resume analysis pipeline.

    A fallback (degraded) analysis is still a success; `degraded` tells the
    two apart.
    """
    body = body or AnalyzeRequest()
    outcome = AnalysisService(db, llm_client).analyze(
        resume_id,
        job_id=body.job_id,
        job_description=body.job_description,
        application_id=body.application_id,
        actor=current_user,
    )
    return AnalyzeResponse(
        analysis_id=outcome.analysis_id,
        feedback=outcome.feedback,
        degraded=outcome.degraded,
    )


@router.get("/resume/{resume_id}", response_model=List[AnalysisResponse])
def list_analyses_for_resume(
    resume_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    analyses = list_resume_analyses(db, resume_id)
    if current_user.role == UserRole.CANDIDATE and any(a.applicant_id != current_user.id for a in analyses):
        raise AccessDeniedError("Not authorized to view these analyses")
    return analyses


@router.get("/{analysis_id}", response_model=AnalysisResponse)
def read_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    analysis = get_analysis(db, analysis_id)
    if current_user.role == UserRole.CANDIDATE and analysis.applicant_id != current_user.id:
        raise AccessDeniedError("Not authorized to view this analysis")
    return analysis
