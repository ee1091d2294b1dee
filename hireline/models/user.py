"""
User model for the two platform roles: recruiters post jobs, candidates apply.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from hireline.database import Base


class UserRole(str, enum.Enum):
    RECRUITER = "RECRUITER"
    CANDIDATE = "CANDIDATE"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CANDIDATE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    resumes = relationship("Resume", foreign_keys="Resume.owner_id", back_populates="owner")
    jobs = relationship("Job", back_populates="recruiter")
    applications = relationship("Application", back_populates="applicant")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_recruiter(self) -> bool:
        return self.role == UserRole.RECRUITER
