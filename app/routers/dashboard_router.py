# /app/routers/dashboard_router.py

# --- Core FastAPI Imports ---
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

# --- Service and Model Imports ---
from ..services import dashboard_service
from ..services.database_service import DatabaseService, get_db_service
from ..models.dashboard_model import DashboardSummary

router = APIRouter()

# --- Endpoint Definition ---
@router.get(
    "/summary",
    response_model=DashboardSummary,
    summary="Get Dashboard Summary",
    description="Headline statistics and the recent-activity feed for the dashboard home page."
)
async def get_dashboard_summary(
    today: Optional[date] = None,
    db: DatabaseService = Depends(get_db_service)
):
    """
    The "thin" router layer: `today` lets the client supply its own calendar
    day for the attendance figures; everything else is delegated.
    """
    return await dashboard_service.get_dashboard_summary(db=db, today=today)
