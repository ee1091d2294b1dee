import json
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from hireline.database import Base

class Analysis(Base):
    """
    One resume analysis run. Rows are insert-only: re-analysis appends a new row.
    """
    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True, index=True)
    resume_id = Column(Integer, ForeignKey("resumes.id", ondelete="SET NULL"), nullable=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)
    # Snapshot of the job description text used for this run
    job_description = Column(Text, nullable=True)
    feedback = Column(Text, nullable=False)  # serialized canonical feedback
    score = Column(Float, nullable=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    normalization_status = Column(String, nullable=False, default="normalized")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def feedback_data(self) -> dict:
        return json.loads(self.feedback)
