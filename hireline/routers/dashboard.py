from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hireline.database import get_db
from hireline.models.user import User
from hireline.routers.auth_deps import get_current_user
from hireline.services.dashboard_service import get_dashboard

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("")
def get_dashboard_info(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"success": True, "dashboardInfo": get_dashboard(db, current_user)}
