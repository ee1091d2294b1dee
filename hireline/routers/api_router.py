from fastapi import APIRouter
from hireline.routers import analysis, applications, auth, dashboard, jobs, resumes, reviews

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(resumes.router)
api_router.include_router(jobs.router)
api_router.include_router(applications.router)
api_router.include_router(reviews.router)
api_router.include_router(analysis.router)
api_router.include_router(dashboard.router)
