# api/dashboard/views.py
"""
Officer dashboard endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentUser
from api.inspections.models import InspectionRead
from .models import Dashboard, AparStats, MonthlyCount, StatusCount
from . import db_manager

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=Dashboard,
    summary="Get the officer dashboard",
)
async def get_dashboard_endpoint(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> Dashboard:
    """
    APAR counts (active, expired, expiring within 90 days), the five latest
    inspections, this year's inspections per month and the APAR status
    distribution.
    """
    data = await db_manager.get_dashboard(db)

    return Dashboard(
        stats=AparStats(**data["stats"]),
        recent_inspections=[InspectionRead.model_validate(i) for i in data["recent_inspections"]],
        monthly_inspections=[MonthlyCount(**m) for m in data["monthly_inspections"]],
        apar_status_distribution=[StatusCount(**s) for s in data["apar_status_distribution"]],
    )
