# api/inspections/db_manager.py
"""
Business logic for inspection records and their checklists.

Every inspection carries exactly one item per checklist component. The
inspection and its items are always written together in one transaction,
and the stored overall status is always derived from the items.
"""
import logging
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from api.apars.db_manager import coerce_date
from core.exceptions import NotFoundError, ValidationError
from core.inspection_rules import (
    ITEM_STATUSES,
    ITEM_TYPES,
    OVERALL_STATUSES,
    derive_overall_status,
)
from core.transaction import atomic
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem, ItemStatus
from . import queries

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def validate_items(items: Sequence[Any] | None) -> tuple[list[dict[str, Any]], dict[str, str]]:
    """
    Normalize submitted checklist items and collect their errors.

    Items may be dicts or objects with item_type/status/notes attributes.
    A missing status defaults to 'good'.
    """
    errors: dict[str, str] = {}
    cleaned: list[dict[str, Any]] = []

    if not items:
        errors["items"] = "The items field is required."
        return cleaned, errors

    for index, item in enumerate(items):
        item_type = _field(item, "item_type")
        item_status = _field(item, "status") or ItemStatus.GOOD.value
        notes = _field(item, "notes")

        if item_type not in ITEM_TYPES:
            errors[f"items.{index}.item_type"] = (
                f"The selected item_type is invalid. Must be one of: {', '.join(ITEM_TYPES)}."
            )
        if item_status not in ITEM_STATUSES:
            errors[f"items.{index}.status"] = (
                f"The selected status is invalid. Must be one of: {', '.join(ITEM_STATUSES)}."
            )
        cleaned.append({
            "item_type": item_type,
            "status": item_status,
            "notes": (notes.strip() or None) if isinstance(notes, str) else notes,
        })

    if not errors:
        submitted = [i["item_type"] for i in cleaned]
        missing = [t for t in ITEM_TYPES if t not in submitted]
        duplicated = sorted({t for t in submitted if submitted.count(t) > 1})
        if missing or duplicated:
            parts = []
            if missing:
                parts.append(f"missing: {', '.join(missing)}")
            if duplicated:
                parts.append(f"duplicated: {', '.join(duplicated)}")
            errors["items"] = (
                f"Each of the {len(ITEM_TYPES)} checklist items must be submitted exactly once "
                f"({'; '.join(parts)})."
            )

    return cleaned, errors


async def _validate_inspection(
    db: AsyncSession,
    *,
    apar_id: int,
    inspection_date: Any,
    items: Sequence[Any] | None,
    overall_status: str | None,
) -> tuple[date, list[dict[str, Any]], str]:
    """
    Check an inspection submission; return (date, cleaned items, derived status).

    Raises:
        NotFoundError: If the APAR doesn't exist
        ValidationError: With a field -> message map
    """
    result = await db.execute(queries.select_apar_by_id(apar_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(f"APAR {apar_id} not found")

    cleaned_items, errors = validate_items(items)

    parsed_date = coerce_date(inspection_date)
    if parsed_date is None:
        errors["inspection_date"] = "The inspection_date field must be a valid date."

    if overall_status is not None and overall_status not in OVERALL_STATUSES:
        errors["overall_status"] = (
            f"The selected overall_status is invalid. Must be one of: {', '.join(OVERALL_STATUSES)}."
        )

    if errors:
        raise ValidationError(errors)

    derived = derive_overall_status(i["status"] for i in cleaned_items)
    if overall_status is not None and overall_status != derived:
        logger.warning(
            "Ignoring submitted overall_status '%s' for APAR %s; items derive '%s'",
            overall_status,
            apar_id,
            derived,
        )

    return parsed_date, cleaned_items, derived


async def get_inspection(db: AsyncSession, inspection_id: int) -> Inspection:
    """
    Get an inspection with its APAR, inspector and checklist items.

    Raises:
        NotFoundError: If the inspection doesn't exist
    """
    stmt = queries.select_inspection_by_id(inspection_id)
    result = await db.execute(stmt)
    inspection = result.scalar_one_or_none()
    if inspection is None:
        raise NotFoundError(f"Inspection {inspection_id} not found")
    return inspection


async def list_inspections(
    db: AsyncSession,
    *,
    skip: int = 0,
    limit: int = 10,
    apar_id: int | None = None,
    inspector_id: int | None = None,
    overall_status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[list[Inspection], int]:
    """Return one page of inspections (latest date first) and the total count."""
    filters = {
        "apar_id": apar_id,
        "inspector_id": inspector_id,
        "overall_status": overall_status,
        "date_from": date_from,
        "date_to": date_to,
    }
    result = await db.execute(queries.count_inspections(**filters))
    total = result.scalar() or 0

    result = await db.execute(queries.select_inspections(skip=skip, limit=limit, **filters))
    return list(result.scalars().all()), total


async def create_inspection(
    db: AsyncSession,
    *,
    inspector_id: int,
    apar_id: int,
    inspection_date: Any,
    items: Sequence[Any],
    overall_status: str | None = None,
    digital_signature: str | None = None,
    notes: str | None = None,
) -> Inspection:
    """
    Record an inspection and its checklist items atomically.

    Args:
        inspector_id: The authenticated user performing the inspection
        overall_status: Optional client hint; the stored value is derived from items

    Raises:
        NotFoundError: If the APAR or inspector doesn't exist
        ValidationError: Bad date, unknown item type/status, incomplete checklist
        TransactionError: If the write fails (nothing is stored)
    """
    result = await db.execute(queries.select_user_by_id(inspector_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(f"User {inspector_id} not found")

    parsed_date, cleaned_items, derived = await _validate_inspection(
        db,
        apar_id=apar_id,
        inspection_date=inspection_date,
        items=items,
        overall_status=overall_status,
    )

    inspection = Inspection(
        apar_id=apar_id,
        inspector_id=inspector_id,
        inspection_date=parsed_date,
        digital_signature=digital_signature,
        overall_status=derived,
        notes=notes,
    )
    inspection.items = [InspectionItem(**item) for item in cleaned_items]

    async with atomic(db, "create inspection"):
        db.add(inspection)

    logger.info(
        "Created inspection %s for APAR %s by user %s: %s",
        inspection.id,
        apar_id,
        inspector_id,
        derived,
    )
    return await get_inspection(db, inspection.id)


async def update_inspection(
    db: AsyncSession,
    inspection_id: int,
    *,
    apar_id: int,
    inspection_date: Any,
    items: Sequence[Any],
    overall_status: str | None = None,
    digital_signature: str | None = None,
    notes: str | None = None,
) -> Inspection:
    """
    Update an inspection and replace its whole checklist.

    The old items are deleted and the new ones inserted inside the same
    transaction as the field update, so other sessions see either the old
    checklist or the new one, never an empty or mixed one.

    Raises:
        NotFoundError: If the inspection or APAR doesn't exist
        ValidationError: As for create
        TransactionError: If the write fails (the old record is untouched)
    """
    result = await db.execute(queries.select_inspection_row(inspection_id))
    inspection = result.scalar_one_or_none()
    if inspection is None:
        raise NotFoundError(f"Inspection {inspection_id} not found")

    parsed_date, cleaned_items, derived = await _validate_inspection(
        db,
        apar_id=apar_id,
        inspection_date=inspection_date,
        items=items,
        overall_status=overall_status,
    )

    async with atomic(db, "update inspection"):
        await db.execute(queries.delete_items_for_inspection(inspection_id))
        inspection.apar_id = apar_id
        inspection.inspection_date = parsed_date
        inspection.digital_signature = digital_signature
        inspection.overall_status = derived
        inspection.notes = notes
        db.add_all(
            InspectionItem(inspection_id=inspection_id, **item) for item in cleaned_items
        )

    logger.info("Updated inspection %s: %s", inspection_id, derived)
    return await get_inspection(db, inspection_id)


async def delete_inspection(db: AsyncSession, inspection_id: int) -> None:
    """
    Delete an inspection and its items.

    Raises:
        NotFoundError: If the inspection doesn't exist
        TransactionError: If the delete fails
    """
    result = await db.execute(queries.select_inspection_row(inspection_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(f"Inspection {inspection_id} not found")

    async with atomic(db, "delete inspection"):
        await db.execute(queries.delete_items_for_inspection(inspection_id))
        await db.execute(queries.delete_inspection(inspection_id))

    logger.info("Deleted inspection %s", inspection_id)
