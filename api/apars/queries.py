# api/apars/queries.py
"""
SQLAlchemy query builders for the APAR registry.
"""
from sqlalchemy import select, delete, func, or_
from sqlalchemy.orm import selectinload

from db_models.apar import Apar
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem


def select_apar_by_id(apar_id: int):
    """Select an APAR by its ID."""
    return select(Apar).where(Apar.id == apar_id)


def select_apar_with_inspections(apar_id: int):
    """Select an APAR with its inspections (newest first), their inspectors and items."""
    return (
        select(Apar)
        .where(Apar.id == apar_id)
        .options(
            selectinload(Apar.inspections).selectinload(Inspection.inspector),
            selectinload(Apar.inspections).selectinload(Inspection.items),
        )
        .execution_options(populate_existing=True)
    )


def select_apar_by_number(number: str, exclude_id: int | None = None):
    """Select an APAR by number, optionally ignoring one row (the one being edited)."""
    stmt = select(Apar).where(Apar.number == number)
    if exclude_id is not None:
        stmt = stmt.where(Apar.id != exclude_id)
    return stmt


def _apply_filters(stmt, status: str | None, search: str | None):
    if status:
        stmt = stmt.where(Apar.status == status)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Apar.number).like(pattern),
                func.lower(Apar.location).like(pattern),
            )
        )
    return stmt


def select_apars(
    status: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
):
    """Select a page of APARs ordered by number."""
    stmt = _apply_filters(select(Apar), status, search)
    return stmt.order_by(Apar.number.asc()).offset(skip).limit(limit)


def count_apars(status: str | None = None, search: str | None = None):
    """Count APARs matching the same filters as select_apars."""
    return _apply_filters(select(func.count(Apar.id)), status, search)


def delete_items_for_apar(apar_id: int):
    """Delete checklist items of every inspection of an APAR."""
    inspection_ids = select(Inspection.id).where(Inspection.apar_id == apar_id)
    return delete(InspectionItem).where(InspectionItem.inspection_id.in_(inspection_ids))


def delete_inspections_for_apar(apar_id: int):
    return delete(Inspection).where(Inspection.apar_id == apar_id)


def delete_apar(apar_id: int):
    return delete(Apar).where(Apar.id == apar_id)
