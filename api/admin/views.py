# api/admin/views.py
"""
Admin-only endpoints: the admin dashboard, registry overviews and user
management.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import AdminUser
from core.exceptions import (
    NotFoundError,
    SelfDeletionError,
    TransactionError,
    ValidationError,
)
from .models import (
    UserCreate,
    UserUpdate,
    AdminUserRead,
    UserListResponse,
    AdminStats,
    AparWithStats,
    InspectionWithPassRate,
    RecentInspection,
    LocationCount,
    AdminDashboard,
)
from . import db_manager

router = APIRouter(prefix="/admin", tags=["admin"])


def _user_read(entry: dict[str, Any]) -> AdminUserRead:
    return AdminUserRead.model_validate(entry["user"]).model_copy(
        update={"inspections_count": entry["inspections_count"]}
    )


def _apar_read(entry: dict[str, Any]) -> AparWithStats:
    return AparWithStats.model_validate(entry["apar"]).model_copy(
        update={
            "inspections_count": entry["inspections_count"],
            "last_inspection": entry["last_inspection"],
        }
    )


def _inspection_read(entry: dict[str, Any]) -> InspectionWithPassRate:
    return InspectionWithPassRate.model_validate(entry["inspection"]).model_copy(
        update={
            "items_count": entry["items_count"],
            "passed_items": entry["passed_items"],
            "pass_rate": entry["pass_rate"],
            "pass_rate_band": entry["pass_rate_band"],
        }
    )


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": exc.message, "errors": exc.errors},
    )


# --- Dashboard ---
@router.get(
    "/dashboard",
    response_model=AdminDashboard,
    summary="Get the admin dashboard",
)
async def admin_dashboard_endpoint(
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> AdminDashboard:
    """
    Registry totals, per-user and per-APAR inspection counts, pass rates
    for every inspection, the five latest records and APARs per location.
    """
    data = await db_manager.get_admin_dashboard(db)

    return AdminDashboard(
        stats=AdminStats(**data["stats"]),
        users=[_user_read(u) for u in data["users"]],
        apars=[_apar_read(a) for a in data["apars"]],
        inspections=[_inspection_read(i) for i in data["inspections"]],
        recent_inspections=[RecentInspection.model_validate(i) for i in data["recent_inspections"]],
        apar_by_location=[LocationCount(**loc) for loc in data["apar_by_location"]],
    )


@router.get(
    "/apars",
    response_model=list[AparWithStats],
    summary="All APARs with inspection counts",
)
async def admin_apars_endpoint(
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> list[AparWithStats]:
    apars = await db_manager.list_apars_with_stats(db)
    return [_apar_read(a) for a in apars]


@router.get(
    "/inspections",
    response_model=list[InspectionWithPassRate],
    summary="All inspections with checklist pass rates",
)
async def admin_inspections_endpoint(
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> list[InspectionWithPassRate]:
    inspections = await db_manager.list_inspections_with_pass_rates(db)
    return [_inspection_read(i) for i in inspections]


# --- User management ---
@router.get("/users", response_model=UserListResponse, summary="List all users")
async def list_users_endpoint(
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> UserListResponse:
    """Users, newest first, with how many inspections each has recorded."""
    users = await db_manager.list_users_with_counts(db)
    return UserListResponse(
        users=[_user_read(u) for u in users],
        total=len(users),
    )


@router.post(
    "/users",
    response_model=AdminUserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user_endpoint(
    payload: UserCreate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> AdminUserRead:
    try:
        user = await db_manager.create_user(db, payload.model_dump())
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return AdminUserRead.model_validate(user)


@router.get("/users/{user_id}", response_model=AdminUserRead, summary="Get user by ID")
async def get_user_endpoint(
    user_id: int,
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> AdminUserRead:
    try:
        user = await db_manager.get_user(db, user_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return AdminUserRead.model_validate(user)


@router.put("/users/{user_id}", response_model=AdminUserRead, summary="Update user")
async def update_user_endpoint(
    user_id: int,
    payload: UserUpdate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> AdminUserRead:
    """Update a user; the password is only changed when a new one is sent."""
    try:
        user = await db_manager.update_user(db, user_id, payload.model_dump())
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return AdminUserRead.model_validate(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
)
async def delete_user_endpoint(
    user_id: int,
    admin: AdminUser,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Permanently delete a user and every inspection they recorded.
    Admins cannot delete their own account.
    """
    try:
        await db_manager.delete_user(db, user_id, acting_user_id=admin.id)
    except SelfDeletionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
