# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, job, resume, application, analysis, review

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .job import Job
from .resume import Resume
from .application import Application, ApplicationStatus
from .analysis import Analysis
from .review import Review

__all__ = [
    "User",
    "UserRole",
    "Job",
    "Resume",
    "Application",
    "ApplicationStatus",
    "Analysis",
    "Review",
]
