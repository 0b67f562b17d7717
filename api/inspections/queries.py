# api/inspections/queries.py
"""
SQLAlchemy query builders for inspection records.
"""
from datetime import date

from sqlalchemy import select, delete, func
from sqlalchemy.orm import selectinload

from db_models.apar import Apar
from db_models.user import User
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem


def select_apar_by_id(apar_id: int):
    return select(Apar).where(Apar.id == apar_id)


def select_user_by_id(user_id: int):
    return select(User).where(User.id == user_id)


def select_inspection_row(inspection_id: int):
    """Select just the inspection row, no relationships."""
    return select(Inspection).where(Inspection.id == inspection_id)


def _with_relations(stmt):
    options = [
        selectinload(Inspection.apar),
        selectinload(Inspection.inspector),
        selectinload(Inspection.items),
    ]
    # Refresh objects already in the identity map (e.g. right after items were replaced)
    return stmt.options(*options).execution_options(populate_existing=True)


def select_inspection_by_id(inspection_id: int):
    """Select an inspection with its APAR, inspector and items."""
    return _with_relations(select_inspection_row(inspection_id))


def _apply_filters(
    stmt,
    apar_id: int | None = None,
    inspector_id: int | None = None,
    overall_status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    if apar_id is not None:
        stmt = stmt.where(Inspection.apar_id == apar_id)
    if inspector_id is not None:
        stmt = stmt.where(Inspection.inspector_id == inspector_id)
    if overall_status:
        stmt = stmt.where(Inspection.overall_status == overall_status)
    if date_from is not None:
        stmt = stmt.where(Inspection.inspection_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(Inspection.inspection_date <= date_to)
    return stmt


def select_inspections(
    *,
    skip: int = 0,
    limit: int = 10,
    **filters,
):
    """Select a page of inspections, latest inspection date first."""
    stmt = _apply_filters(select(Inspection), **filters)
    stmt = stmt.order_by(Inspection.inspection_date.desc(), Inspection.id.desc())
    return _with_relations(stmt.offset(skip).limit(limit))


def count_inspections(**filters):
    return _apply_filters(select(func.count(Inspection.id)), **filters)


def delete_items_for_inspection(inspection_id: int):
    return delete(InspectionItem).where(InspectionItem.inspection_id == inspection_id)


def delete_inspection(inspection_id: int):
    return delete(Inspection).where(Inspection.id == inspection_id)
