# api/dashboard/models.py
"""
Pydantic models for the officer dashboard.
"""
from pydantic import BaseModel, computed_field

from core import labels
from api.inspections.models import InspectionRead


class AparStats(BaseModel):
    """Counts shown on the dashboard cards."""
    total_apars: int
    active_apars: int
    expired_apars: int
    expiring_soon: int


class MonthlyCount(BaseModel):
    month: int  # 1-12
    count: int


class StatusCount(BaseModel):
    status: str
    count: int

    @computed_field
    @property
    def status_label(self) -> str:
        return labels.apar_status_label(self.status)


class Dashboard(BaseModel):
    stats: AparStats
    recent_inspections: list[InspectionRead]
    monthly_inspections: list[MonthlyCount]
    apar_status_distribution: list[StatusCount]
