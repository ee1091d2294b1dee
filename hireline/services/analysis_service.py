"""
Resume analysis pipeline.

VALIDATING -> EXTRACTING -> JOB_LOOKUP -> PROMPTING -> REQUESTING -> PARSING
-> NORMALIZING -> PERSISTING -> LINKING_APPLICATION -> DONE

Any stage may end in FAILED with an AppException. Parse failures are the one
exception to that rule: they are recovered into a degraded analysis.

Linking happens after the analysis row is committed, so an unknown
application id yields NotFound while the analysis stays persisted.
"""
import enum
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hireline.core import prompts
from hireline.core.exceptions import (
    AccessDeniedError,
    AppException,
    ExtractionError,
    InvalidInputError,
    NotFoundError,
    ParseError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from hireline.models.analysis import Analysis
from hireline.models.application import Application
from hireline.models.job import Job
from hireline.models.resume import Resume
from hireline.models.user import User, UserRole
from hireline.services.feedback_normalizer import extract_match_score, normalize_feedback
from hireline.services.llm_client import LLMClient
from hireline.services.response_parser import parse_model_response
from hireline.services.text_extraction import extract_text, resolve_resume_path

logger = logging.getLogger(__name__)

EMPTY_RESUME_MESSAGE = "Failed to extract text from resume - file may be empty or corrupted"
_DIGITS = re.compile(r"^[0-9]+$")


class PipelineStage(str, enum.Enum):
    VALIDATING = "validating"
    EXTRACTING = "extracting"
    JOB_LOOKUP = "job_lookup"
    PROMPTING = "prompting"
    REQUESTING = "requesting"
    PARSING = "parsing"
    NORMALIZING = "normalizing"
    PERSISTING = "persisting"
    LINKING_APPLICATION = "linking_application"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AnalysisOutcome:
    analysis_id: int
    feedback: Dict[str, Any]
    score: Optional[float]
    degraded: bool
    shape: str


def parse_identifier(value: Any, label: str, required: bool = False) -> Optional[int]:
    """Accept positive integers (or their decimal string form); reject anything else."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"Invalid {label}")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}")
    if isinstance(value, int):
        identifier = value
    elif isinstance(value, str) and _DIGITS.match(value.strip()):
        identifier = int(value.strip())
    else:
        raise ValidationError(f"Invalid {label}")
    if identifier <= 0:
        raise ValidationError(f"Invalid {label}")
    return identifier


class AnalysisService:
    def __init__(self, db: Session, llm_client: LLMClient):
        self.db = db
        self.llm_client = llm_client
        self.stage = PipelineStage.VALIDATING

    def _enter(self, stage: PipelineStage) -> None:
        self.stage = stage
        logger.debug(f"Analysis pipeline stage: {stage.value}")

    def analyze(
        self,
        resume_id: Any,
        job_id: Any = None,
        job_description: Optional[str] = None,
        application_id: Any = None,
        actor: Optional[User] = None,
    ) -> AnalysisOutcome:
        try:
            return self._run(resume_id, job_id, job_description, application_id, actor)
        except AppException as e:
            failed_at = self.stage
            self.stage = PipelineStage.FAILED
            logger.warning(
                f"Analysis failed at {failed_at.value}: {e.message}",
                extra={"stage": failed_at.value, "error_code": e.error_code},
            )
            raise

    def _run(self, resume_id, job_id, job_description, application_id, actor) -> AnalysisOutcome:
        self._enter(PipelineStage.VALIDATING)
        resume, job, app_id = self._validate(resume_id, job_id, application_id, actor)

        self._enter(PipelineStage.EXTRACTING)
        resume_text = self._extract(resume)

        self._enter(PipelineStage.JOB_LOOKUP)
        if job is not None:
            job_description = job.description
        elif job_description is not None and not job_description.strip():
            job_description = None

        self._enter(PipelineStage.PROMPTING)
        system_prompt, user_content = prompts.compose_analysis_prompts(resume_text, job_description)

        self._enter(PipelineStage.REQUESTING)
        try:
            raw_response = self.llm_client.chat_completion(system_prompt, user_content)
        except ProviderError:
            raise
        except Exception as e:
            logger.exception("Unexpected provider client failure.")
            raise ProviderError(f"AI service error: {e}") from e

        self._enter(PipelineStage.PARSING)
        try:
            parsed = parse_model_response(raw_response)
        except ParseError as e:
            logger.warning(f"AI response was not valid JSON, continuing with fallback feedback: {e.message}")
            parsed = {"error": e.message, "reason": e.reason, "raw": e.raw_text}

        self._enter(PipelineStage.NORMALIZING)
        result = normalize_feedback(parsed)
        score = extract_match_score(result.feedback)

        self._enter(PipelineStage.PERSISTING)
        analysis = self._persist(resume, job, job_description, result.feedback, score, result.degraded)
        if result.degraded:
            logger.warning(
                f"Analysis {analysis.id} persisted with fallback feedback",
                extra={"analysis_id": analysis.id, "resume_id": resume.id, "normalization": "degraded"},
            )

        if app_id is not None:
            self._enter(PipelineStage.LINKING_APPLICATION)
            self._link_application(app_id, analysis, resume, job)

        self._enter(PipelineStage.DONE)
        logger.info(f"Analysis {analysis.id} completed for resume {resume.id} (shape={result.shape})")
        return AnalysisOutcome(
            analysis_id=analysis.id,
            feedback=result.feedback,
            score=score,
            degraded=result.degraded,
            shape=result.shape,
        )

    def _validate(
        self, resume_id: Any, job_id: Any, application_id: Any, actor: Optional[User]
    ) -> Tuple[Resume, Optional[Job], Optional[int]]:
        rid = parse_identifier(resume_id, "resume ID", required=True)
        jid = parse_identifier(job_id, "job ID")
        app_id = parse_identifier(application_id, "application ID")

        resume = self.db.query(Resume).filter(Resume.id == rid).first()
        if not resume:
            raise NotFoundError("Resume not found")
        if actor is not None and actor.role == UserRole.CANDIDATE and resume.owner_id != actor.id:
            raise AccessDeniedError("Not authorized to analyze this resume")
        if not resume.file_path:
            raise ValidationError("No file associated with this resume")

        job = None
        if jid is not None:
            job = self.db.query(Job).filter(Job.id == jid).first()
            if not job:
                raise NotFoundError("Job not found")
        return resume, job, app_id

    def _extract(self, resume: Resume) -> str:
        path = resolve_resume_path(resume.file_path)
        try:
            text = extract_text(path, os.path.splitext(resume.file_path)[1])
        except ExtractionError as e:
            raise InvalidInputError(EMPTY_RESUME_MESSAGE, details={"cause": e.message}) from e
        if not text:
            raise InvalidInputError(EMPTY_RESUME_MESSAGE)
        return text

    def _persist(
        self,
        resume: Resume,
        job: Optional[Job],
        job_description: Optional[str],
        feedback: Dict[str, Any],
        score: Optional[float],
        degraded: bool,
    ) -> Analysis:
        analysis = Analysis(
            resume_id=resume.id,
            job_id=job.id if job else None,
            job_description=job_description,
            feedback=json.dumps(feedback),
            score=score,
            applicant_id=resume.owner_id,
            normalization_status="degraded" if degraded else "normalized",
        )
        try:
            self.db.add(analysis)
            self.db.commit()
            self.db.refresh(analysis)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to persist analysis for resume {resume.id}: {e}")
            raise PersistenceError("Failed to save analysis.") from e
        return analysis

    def _link_application(self, application_id: int, analysis: Analysis, resume: Resume, job: Optional[Job]) -> None:
        application = self.db.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise NotFoundError("Application not found")
        if application.resume_id != resume.id or (job is not None and application.job_id != job.id):
            raise ValidationError("Application does not belong to this resume and job")

        application.analysis_id = analysis.id
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to link analysis {analysis.id} to application {application_id}: {e}")
            raise PersistenceError("Failed to link analysis to application.") from e


# --- read side ---

def get_analysis(db: Session, analysis_id: Any) -> Analysis:
    aid = parse_identifier(analysis_id, "analysis ID", required=True)
    analysis = db.query(Analysis).filter(Analysis.id == aid).first()
    if not analysis:
        raise NotFoundError("Analysis not found")
    return analysis


def list_resume_analyses(db: Session, resume_id: Any) -> List[Analysis]:
    rid = parse_identifier(resume_id, "resume ID", required=True)
    return (
        db.query(Analysis)
        .filter(Analysis.resume_id == rid)
        .order_by(Analysis.created_at.desc(), Analysis.id.desc())
        .all()
    )
