# api/admin/db_manager.py
"""
Business logic for the admin dashboard and user management.
"""
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core import inspection_rules as rules
from core.exceptions import NotFoundError, SelfDeletionError, TransactionError, ValidationError
from core.security import get_password_hash
from core.transaction import atomic
from db_models.apar import AparStatus
from db_models.user import User, UserRole
from . import queries

logger = logging.getLogger(__name__)

USER_ROLES = tuple(r.value for r in UserRole)
MIN_PASSWORD_LENGTH = 8

# Units counted as out of service on the admin dashboard
OUT_OF_SERVICE_STATUSES = [AparStatus.INACTIVE.value, AparStatus.EXPIRED.value]

EMAIL_TAKEN = "The email has already been taken."


def _as_date(value: Any) -> date | None:
    # MAX() over a date column comes back as a string on SQLite
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


async def _scalar(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar() or 0


# --- Dashboard ---
async def get_admin_stats(db: AsyncSession, today: date | None = None) -> dict[str, int]:
    """
    Headline counts for the admin dashboard.

    'apar_belum_cek' counts APARs without an inspection dated in the
    current calendar month.
    """
    month_start, month_end = rules.month_bounds(today)

    return {
        "total_apar": await _scalar(db, queries.count_apars()),
        "total_users": await _scalar(db, queries.count_users()),
        "total_inspections": await _scalar(db, queries.count_inspections()),
        "apar_baik": await _scalar(
            db, queries.count_apars_with_statuses([AparStatus.ACTIVE.value])
        ),
        "apar_rusak": await _scalar(
            db, queries.count_apars_with_statuses(OUT_OF_SERVICE_STATUSES)
        ),
        "apar_belum_cek": await _scalar(
            db, queries.count_apars_not_inspected_between(month_start, month_end)
        ),
    }


async def list_users_with_counts(db: AsyncSession) -> list[dict[str, Any]]:
    result = await db.execute(queries.select_users_with_inspection_counts())
    return [
        {"user": row.User, "inspections_count": row.inspections_count}
        for row in result
    ]


async def list_apars_with_stats(db: AsyncSession) -> list[dict[str, Any]]:
    result = await db.execute(queries.select_apars_with_inspection_stats())
    return [
        {
            "apar": row.Apar,
            "inspections_count": row.inspections_count,
            "last_inspection": _as_date(row.last_inspection),
        }
        for row in result
    ]


async def list_inspections_with_pass_rates(db: AsyncSession) -> list[dict[str, Any]]:
    """Every inspection with its checklist pass rate, newest record first."""
    result = await db.execute(queries.select_inspections_with_item_counts())
    rows = []
    for row in result:
        items_count = int(row.items_count or 0)
        passed_items = int(row.passed_items or 0)
        rate = rules.pass_rate(passed_items, items_count)
        rows.append({
            "inspection": row.Inspection,
            "items_count": items_count,
            "passed_items": passed_items,
            "pass_rate": rate,
            "pass_rate_band": rules.pass_rate_band(rate),
        })
    return rows


async def get_latest_recorded_inspections(db: AsyncSession, limit: int = 5) -> list:
    result = await db.execute(queries.select_latest_recorded_inspections(limit))
    return list(result.scalars().all())


async def get_apars_by_location(db: AsyncSession) -> list[dict[str, Any]]:
    result = await db.execute(queries.count_apars_per_location())
    return [{"location": row.location, "count": row.total} for row in result]


async def get_admin_dashboard(db: AsyncSession, today: date | None = None) -> dict[str, Any]:
    """Everything the admin dashboard shows, in one call."""
    today = today or date.today()
    return {
        "stats": await get_admin_stats(db, today),
        "users": await list_users_with_counts(db),
        "apars": await list_apars_with_stats(db),
        "inspections": await list_inspections_with_pass_rates(db),
        "recent_inspections": await get_latest_recorded_inspections(db),
        "apar_by_location": await get_apars_by_location(db),
    }


# --- Users ---
async def get_user(db: AsyncSession, user_id: int) -> User:
    """
    Raises:
        NotFoundError: If the user doesn't exist
    """
    result = await db.execute(queries.select_user_by_id(user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


async def _validate_user_fields(
    db: AsyncSession,
    fields: Mapping[str, Any],
    *,
    user_id: int | None = None,
) -> dict[str, Any]:
    """
    Check submitted user fields and return the cleaned values.

    The password is required on create and optional on update; when given,
    a password_confirmation (if present) must match it.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    for name in ("name", "email"):
        value = fields.get(name)
        value = value.strip() if isinstance(value, str) else value
        if not value:
            errors[name] = f"The {name} field is required."
        cleaned[name] = value

    role = fields.get("role") or UserRole.PETUGAS.value
    if role not in USER_ROLES:
        errors["role"] = f"The selected role is invalid. Must be one of: {', '.join(USER_ROLES)}."
    cleaned["role"] = role

    password = fields.get("password") or None
    if password is None:
        if user_id is None:
            errors["password"] = "The password field is required."
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"The password must be at least {MIN_PASSWORD_LENGTH} characters."
    else:
        confirmation = fields.get("password_confirmation")
        if confirmation is not None and confirmation != password:
            errors["password"] = "The password confirmation does not match."
    cleaned["password"] = password

    if "email" not in errors:
        result = await db.execute(queries.select_user_by_email(cleaned["email"], exclude_id=user_id))
        if result.scalars().first() is not None:
            errors["email"] = EMAIL_TAKEN

    if errors:
        raise ValidationError(errors)

    return cleaned


async def create_user(db: AsyncSession, fields: Mapping[str, Any]) -> User:
    """
    Create a user account.

    Raises:
        ValidationError: Missing fields, duplicate email, unknown role, short password
        TransactionError: If the insert fails
    """
    cleaned = await _validate_user_fields(db, fields)

    user = User(
        name=cleaned["name"],
        email=cleaned["email"],
        role=cleaned["role"],
        hashed_password=get_password_hash(cleaned["password"]),
    )
    try:
        async with atomic(db, "create user"):
            db.add(user)
    except TransactionError as exc:
        # The email was registered concurrently after validation
        if isinstance(exc.__cause__, IntegrityError):
            raise ValidationError({"email": EMAIL_TAKEN}) from exc
        raise
    await db.refresh(user)

    logger.info("Created user %s (id=%s, role=%s)", user.email, user.id, user.role)
    return user


async def update_user(db: AsyncSession, user_id: int, fields: Mapping[str, Any]) -> User:
    """
    Update name, email and role; the password only changes when one is given.

    Raises:
        NotFoundError: If the user doesn't exist
        ValidationError: As for create; the user's own email is not a duplicate
        TransactionError: If the update fails
    """
    user = await get_user(db, user_id)
    cleaned = await _validate_user_fields(db, fields, user_id=user_id)

    try:
        async with atomic(db, "update user"):
            user.name = cleaned["name"]
            user.email = cleaned["email"]
            user.role = cleaned["role"]
            if cleaned["password"]:
                user.hashed_password = get_password_hash(cleaned["password"])
    except TransactionError as exc:
        if isinstance(exc.__cause__, IntegrityError):
            raise ValidationError({"email": EMAIL_TAKEN}) from exc
        raise
    await db.refresh(user)

    logger.info("Updated user %s (id=%s)", user.email, user.id)
    return user


async def delete_user(db: AsyncSession, user_id: int, *, acting_user_id: int) -> None:
    """
    Permanently delete a user together with the inspections they recorded.

    Raises:
        SelfDeletionError: If an admin targets their own account
        NotFoundError: If the user doesn't exist
        TransactionError: If any delete fails (nothing is removed)
    """
    if user_id == acting_user_id:
        raise SelfDeletionError("You cannot delete your own account")

    user = await get_user(db, user_id)
    email = user.email

    async with atomic(db, "delete user"):
        await db.execute(queries.delete_items_for_inspector(user_id))
        result = await db.execute(queries.delete_inspections_for_inspector(user_id))
        removed_inspections = result.rowcount
        await db.execute(queries.delete_user(user_id))

    logger.info(
        "Deleted user %s (id=%s) and %s inspection(s)",
        email,
        user_id,
        removed_inspections,
    )
