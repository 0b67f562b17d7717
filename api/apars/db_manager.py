# api/apars/db_manager.py
"""
Business logic for the APAR (fire extinguisher) registry.
"""
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, TransactionError, ValidationError
from core.transaction import atomic
from db_models.apar import Apar, AparStatus, AparType
from . import queries

logger = logging.getLogger(__name__)

APAR_TYPES = tuple(t.value for t in AparType)
APAR_STATUSES = tuple(s.value for s in AparStatus)

REQUIRED_FIELDS = ("number", "location", "type", "capacity", "fill_date", "expiry_date", "status")
EDITABLE_FIELDS = REQUIRED_FIELDS + ("notes",)


def _number_taken(number: str) -> ValidationError:
    return ValidationError({"number": f"The number '{number}' has already been taken."})


def coerce_date(value: Any) -> date | None:
    """Accept date objects or ISO 'YYYY-MM-DD' strings; None if unparseable."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


async def validate_apar_fields(
    db: AsyncSession,
    fields: Mapping[str, Any],
    *,
    apar_id: int | None = None,
) -> dict[str, Any]:
    """
    Check a submitted APAR field set and return the cleaned values.

    All problems are collected first so the caller gets every field error
    in one response.

    Raises:
        ValidationError: With a field -> message map
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            errors[name] = f"The {name} field is required."
        cleaned[name] = value

    notes = fields.get("notes")
    cleaned["notes"] = (notes.strip() or None) if isinstance(notes, str) else notes

    if "type" not in errors and cleaned["type"] not in APAR_TYPES:
        errors["type"] = f"The selected type is invalid. Must be one of: {', '.join(APAR_TYPES)}."

    if "status" not in errors and cleaned["status"] not in APAR_STATUSES:
        errors["status"] = f"The selected status is invalid. Must be one of: {', '.join(APAR_STATUSES)}."

    for name in ("fill_date", "expiry_date"):
        if name in errors:
            continue
        parsed = coerce_date(cleaned[name])
        if parsed is None:
            errors[name] = f"The {name} field must be a valid date."
        cleaned[name] = parsed

    if "fill_date" not in errors and "expiry_date" not in errors:
        if cleaned["expiry_date"] <= cleaned["fill_date"]:
            errors["expiry_date"] = "The expiry_date must be a date after fill_date."

    if "number" not in errors:
        stmt = queries.select_apar_by_number(cleaned["number"], exclude_id=apar_id)
        result = await db.execute(stmt)
        if result.scalars().first() is not None:
            errors.update(_number_taken(cleaned["number"]).errors)

    if errors:
        raise ValidationError(errors)

    return cleaned


async def get_apar(
    db: AsyncSession,
    apar_id: int,
    *,
    with_inspections: bool = False,
) -> Apar:
    """
    Get an APAR by ID, optionally with its inspection history.

    Raises:
        NotFoundError: If the APAR doesn't exist
    """
    if with_inspections:
        stmt = queries.select_apar_with_inspections(apar_id)
    else:
        stmt = queries.select_apar_by_id(apar_id)
    result = await db.execute(stmt)
    apar = result.scalar_one_or_none()
    if apar is None:
        raise NotFoundError(f"APAR {apar_id} not found")
    return apar


async def list_apars(
    db: AsyncSession,
    *,
    skip: int = 0,
    limit: int = 10,
    status: str | None = None,
    search: str | None = None,
) -> tuple[list[Apar], int]:
    """Return one page of APARs ordered by number, plus the total match count."""
    result = await db.execute(queries.count_apars(status=status, search=search))
    total = result.scalar() or 0

    result = await db.execute(queries.select_apars(status=status, search=search, skip=skip, limit=limit))
    return list(result.scalars().all()), total


async def create_apar(db: AsyncSession, fields: Mapping[str, Any]) -> Apar:
    """
    Register a new APAR.

    Raises:
        ValidationError: Duplicate number, unknown type/status, expiry not after fill
        TransactionError: If the insert fails
    """
    cleaned = await validate_apar_fields(db, fields)

    apar = Apar(**cleaned)
    try:
        async with atomic(db, "create APAR"):
            db.add(apar)
    except TransactionError as exc:
        # Another request registered the same number after validation
        if isinstance(exc.__cause__, IntegrityError):
            raise _number_taken(cleaned["number"]) from exc
        raise
    await db.refresh(apar)

    logger.info("Created APAR %s (id=%s) at %s", apar.number, apar.id, apar.location)
    return apar


async def update_apar(db: AsyncSession, apar_id: int, fields: Mapping[str, Any]) -> Apar:
    """
    Replace the editable fields of an APAR.

    Raises:
        NotFoundError: If the APAR doesn't exist
        ValidationError: As for create; the APAR's own number is not a duplicate
        TransactionError: If the update fails
    """
    apar = await get_apar(db, apar_id)
    cleaned = await validate_apar_fields(db, fields, apar_id=apar_id)

    try:
        async with atomic(db, "update APAR"):
            for name in EDITABLE_FIELDS:
                setattr(apar, name, cleaned[name])
    except TransactionError as exc:
        if isinstance(exc.__cause__, IntegrityError):
            raise _number_taken(cleaned["number"]) from exc
        raise
    await db.refresh(apar)

    logger.info("Updated APAR %s (id=%s)", apar.number, apar.id)
    return apar


async def delete_apar(db: AsyncSession, apar_id: int) -> None:
    """
    Permanently delete an APAR with all of its inspections and their items.

    Children go first, then the APAR row, all in one transaction.

    Raises:
        NotFoundError: If the APAR doesn't exist
        TransactionError: If any delete fails (nothing is removed)
    """
    apar = await get_apar(db, apar_id)
    number = apar.number

    async with atomic(db, "delete APAR"):
        await db.execute(queries.delete_items_for_apar(apar_id))
        result = await db.execute(queries.delete_inspections_for_apar(apar_id))
        removed_inspections = result.rowcount
        await db.execute(queries.delete_apar(apar_id))

    logger.info(
        "Deleted APAR %s (id=%s) and %s inspection(s)",
        number,
        apar_id,
        removed_inspections,
    )
