# api/dashboard/queries.py
"""
SQLAlchemy query builders for the officer dashboard.
"""
from datetime import date

from sqlalchemy import select, func, extract
from sqlalchemy.orm import selectinload

from db_models.apar import Apar
from db_models.inspection import Inspection


def count_total_apars():
    """Count all APARs."""
    return select(func.count(Apar.id))


def count_apars_with_status(status: str):
    return select(func.count(Apar.id)).where(Apar.status == status)


def count_expired_apars(today: date):
    """Count APARs whose expiry date is already past."""
    return select(func.count(Apar.id)).where(Apar.expiry_date < today)


def count_apars_expiring_between(start: date, end: date):
    """Count APARs expiring in the half-open range [start, end)."""
    return (
        select(func.count(Apar.id))
        .where(
            Apar.expiry_date >= start,
            Apar.expiry_date < end,
        )
    )


def select_recent_inspections(limit: int = 5):
    """Latest inspections by inspection date, with APAR and inspector."""
    return (
        select(Inspection)
        .options(
            selectinload(Inspection.apar),
            selectinload(Inspection.inspector),
            selectinload(Inspection.items),
        )
        .order_by(Inspection.inspection_date.desc(), Inspection.id.desc())
        .limit(limit)
    )


def count_inspections_per_month(year_start: date, year_end: date):
    """
    Count inspections per month number for one calendar year.
    Months without inspections are simply absent.
    """
    month = extract("month", Inspection.inspection_date).label("month")
    return (
        select(month, func.count(Inspection.id).label("total"))
        .where(
            Inspection.inspection_date >= year_start,
            Inspection.inspection_date < year_end,
        )
        .group_by(month)
        .order_by(month)
    )


def count_apars_per_status():
    return (
        select(Apar.status, func.count(Apar.id).label("total"))
        .group_by(Apar.status)
        .order_by(Apar.status)
    )
