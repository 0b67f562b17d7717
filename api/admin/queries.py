# api/admin/queries.py
"""
SQLAlchemy query builders for the admin dashboard and user management.
"""
from datetime import date

from sqlalchemy import select, delete, func, case
from sqlalchemy.orm import selectinload

from db_models.apar import Apar
from db_models.user import User
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem, ItemStatus


def count_apars():
    return select(func.count(Apar.id))


def count_users():
    return select(func.count(User.id))


def count_inspections():
    return select(func.count(Inspection.id))


def count_apars_with_statuses(statuses: list[str]):
    return select(func.count(Apar.id)).where(Apar.status.in_(statuses))


def count_apars_not_inspected_between(start: date, end: date):
    """
    Count APARs with no inspection dated in [start, end).
    Uses a correlated NOT EXISTS subquery.
    """
    inspected = (
        select(Inspection.id)
        .where(
            Inspection.apar_id == Apar.id,
            Inspection.inspection_date >= start,
            Inspection.inspection_date < end,
        )
        .exists()
    )
    return select(func.count(Apar.id)).where(~inspected)


def select_users_with_inspection_counts():
    """Users (newest first) with the number of inspections each performed."""
    return (
        select(User, func.count(Inspection.id).label("inspections_count"))
        .outerjoin(Inspection, Inspection.inspector_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
    )


def select_apars_with_inspection_stats():
    """APARs by number with inspection count and latest inspection date."""
    return (
        select(
            Apar,
            func.count(Inspection.id).label("inspections_count"),
            func.max(Inspection.inspection_date).label("last_inspection"),
        )
        .outerjoin(Inspection, Inspection.apar_id == Apar.id)
        .group_by(Apar.id)
        .order_by(Apar.number.asc())
    )


def select_inspections_with_item_counts():
    """Inspections (newest record first) with total and passed checklist item counts."""
    passed = func.coalesce(
        func.sum(case((InspectionItem.status == ItemStatus.GOOD.value, 1), else_=0)),
        0,
    )
    return (
        select(
            Inspection,
            func.count(InspectionItem.id).label("items_count"),
            passed.label("passed_items"),
        )
        .outerjoin(InspectionItem, InspectionItem.inspection_id == Inspection.id)
        .group_by(Inspection.id)
        .options(
            selectinload(Inspection.apar),
            selectinload(Inspection.inspector),
        )
        .order_by(Inspection.created_at.desc(), Inspection.id.desc())
    )


def select_latest_recorded_inspections(limit: int = 5):
    """Most recently recorded inspections, by creation time."""
    return (
        select(Inspection)
        .options(
            selectinload(Inspection.apar),
            selectinload(Inspection.inspector),
        )
        .order_by(Inspection.created_at.desc(), Inspection.id.desc())
        .limit(limit)
    )


def count_apars_per_location():
    """APAR count per location, largest first; equal counts by location name."""
    total = func.count(Apar.id)
    return (
        select(Apar.location, total.label("total"))
        .group_by(Apar.location)
        .order_by(total.desc(), Apar.location.asc())
    )


# --- Users ---
def select_user_by_id(user_id: int):
    return select(User).where(User.id == user_id)


def select_user_by_email(email: str, exclude_id: int | None = None):
    stmt = select(User).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return stmt


def delete_items_for_inspector(user_id: int):
    inspection_ids = select(Inspection.id).where(Inspection.inspector_id == user_id)
    return delete(InspectionItem).where(InspectionItem.inspection_id.in_(inspection_ids))


def delete_inspections_for_inspector(user_id: int):
    return delete(Inspection).where(Inspection.inspector_id == user_id)


def delete_user(user_id: int):
    return delete(User).where(User.id == user_id)
