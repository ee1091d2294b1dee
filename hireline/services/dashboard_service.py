"""
Dashboard aggregates for recruiters and candidates.
"""
from collections import Counter
from typing import Any, Dict

from sqlalchemy.orm import Session

from hireline.core.exceptions import ValidationError
from hireline.models.analysis import Analysis
from hireline.models.application import Application, ApplicationStatus
from hireline.models.job import Job
from hireline.models.resume import Resume
from hireline.models.user import User, UserRole


def _status_counts(applications) -> Dict[str, int]:
    counts = Counter(app.status.value for app in applications)
    return {status.value: counts.get(status.value, 0) for status in ApplicationStatus}


def _user_info(user: User) -> Dict[str, Any]:
    return {"id": user.id, "email": user.email, "username": user.username, "role": user.role.value}


def recruiter_dashboard(db: Session, user: User) -> Dict[str, Any]:
    jobs = db.query(Job).filter(Job.recruiter_id == user.id).order_by(Job.id).all()
    applications = (
        db.query(Application)
        .join(Job)
        .filter(Job.recruiter_id == user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    per_job = Counter(app.job_id for app in applications)

    return {
        "recruiter": _user_info(user),
        "metrics": {
            "totalJobs": len(jobs),
            "totalApplications": len(applications),
            "uniqueCandidates": len({app.applicant_id for app in applications}),
            "applicationsByStatus": _status_counts(applications),
        },
        "jobs": [{"id": job.id, "title": job.title, "company": job.company} for job in jobs],
        "applicationsPerJob": [
            {"jobId": job.id, "jobTitle": job.title, "totalApplications": per_job.get(job.id, 0)}
            for job in jobs
        ],
        "recentApplications": [
            {
                "id": app.id,
                "jobId": app.job_id,
                "jobTitle": app.job.title,
                "applicant": {"id": app.applicant.id, "username": app.applicant.username, "email": app.applicant.email},
                "status": app.status.value,
            }
            for app in applications[:5]
        ],
    }


def candidate_dashboard(db: Session, user: User) -> Dict[str, Any]:
    applications = (
        db.query(Application)
        .filter(Application.applicant_id == user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    resumes = db.query(Resume).filter(Resume.owner_id == user.id).all()
    analyses = (
        db.query(Analysis)
        .filter(Analysis.applicant_id == user.id)
        .order_by(Analysis.created_at.desc(), Analysis.id.desc())
        .all()
    )

    by_status = _status_counts(applications)
    success_rate = (
        round(by_status[ApplicationStatus.ACCEPTED.value] / len(applications) * 100, 1)
        if applications else 0
    )
    usage = Counter(app.resume_id for app in applications)
    resume_usage = sorted(
        ({"resumeId": r.id, "resumeTitle": r.title, "uses": usage.get(r.id, 0)} for r in resumes),
        key=lambda item: item["uses"],
        reverse=True,
    )

    return {
        "candidate": _user_info(user),
        "metrics": {
            "totalApplications": len(applications),
            "applicationsByStatus": by_status,
            "successRate": success_rate,
            "totalResumes": len(resumes),
            "totalAnalyses": len(analyses),
        },
        "applications": [
            {
                "id": app.id,
                "jobTitle": app.job.title,
                "company": app.job.company,
                "status": app.status.value,
                "appliedOn": app.created_at.isoformat() if app.created_at else None,
                "analysisId": app.analysis_id,
            }
            for app in applications
        ],
        "resumeUsage": resume_usage[0] if resume_usage else None,
        "recentAnalyses": [
            {
                "id": a.id,
                "resumeId": a.resume_id,
                "jobId": a.job_id,
                "score": a.score,
                "normalizationStatus": a.normalization_status,
            }
            for a in analyses[:3]
        ],
    }


def get_dashboard(db: Session, user: User) -> Dict[str, Any]:
    if user.role == UserRole.RECRUITER:
        return recruiter_dashboard(db, user)
    if user.role == UserRole.CANDIDATE:
        return candidate_dashboard(db, user)
    raise ValidationError("Invalid user role")
