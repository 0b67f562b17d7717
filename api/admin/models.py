# api/admin/models.py
"""
Pydantic models for the admin dashboard and user management.
"""
from datetime import date

from pydantic import BaseModel, EmailStr, Field

from api.apars.models import AparRead
from api.auth.models import UserResponse
from api.inspections.models import AparBrief, InspectorBrief, InspectionBase


# --- User management ---
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    password_confirmation: str | None = None
    role: str = Field("petugas", description="admin | petugas")


class UserUpdate(BaseModel):
    """Leave password empty to keep the current one."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str | None = None
    password_confirmation: str | None = None
    role: str = Field("petugas", description="admin | petugas")


class AdminUserRead(UserResponse):
    inspections_count: int = 0


class UserListResponse(BaseModel):
    users: list[AdminUserRead]
    total: int


# --- Dashboard ---
class AdminStats(BaseModel):
    total_apar: int
    total_users: int
    total_inspections: int
    apar_baik: int  # status active
    apar_rusak: int  # status inactive or expired
    apar_belum_cek: int  # no inspection this calendar month


class AparWithStats(AparRead):
    inspections_count: int = 0
    last_inspection: date | None = None


class InspectionWithPassRate(InspectionBase):
    apar: AparBrief | None = None
    inspector: InspectorBrief | None = None
    items_count: int = 0
    passed_items: int = 0
    pass_rate: int = 0
    pass_rate_band: str = "critical"


class RecentInspection(InspectionBase):
    apar: AparBrief | None = None
    inspector: InspectorBrief | None = None


class LocationCount(BaseModel):
    location: str
    count: int


class AdminDashboard(BaseModel):
    stats: AdminStats
    users: list[AdminUserRead]
    apars: list[AparWithStats]
    inspections: list[InspectionWithPassRate]
    recent_inspections: list[RecentInspection]
    apar_by_location: list[LocationCount]

