# api/inspections/views.py
"""
Inspection record endpoints.
"""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core import labels
from core.deps import CurrentUser
from core.exceptions import NotFoundError, TransactionError, ValidationError
from .models import (
    InspectionCreate,
    InspectionUpdate,
    InspectionRead,
    InspectionListResponse,
    InspectionOptions,
)
from . import db_manager

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.get(
    "",
    response_model=InspectionListResponse,
    summary="List inspections",
)
async def list_inspections_endpoint(
    current_user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    apar_id: int | None = Query(None),
    inspector_id: int | None = Query(None),
    overall_status: str | None = Query(None, description="good | needs_attention | critical"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> InspectionListResponse:
    """
    List inspections, latest inspection date first.
    """
    inspections, total = await db_manager.list_inspections(
        db,
        skip=skip,
        limit=limit,
        apar_id=apar_id,
        inspector_id=inspector_id,
        overall_status=overall_status,
        date_from=date_from,
        date_to=date_to,
    )
    return InspectionListResponse(
        inspections=[InspectionRead.model_validate(i) for i in inspections],
        total=total,
    )


@router.get(
    "/options",
    response_model=InspectionOptions,
    summary="Checklist choices for inspection forms",
)
async def inspection_options_endpoint(current_user: CurrentUser) -> InspectionOptions:
    return InspectionOptions(
        item_types=labels.ITEM_TYPE_LABELS,
        item_statuses=labels.ITEM_STATUS_LABELS,
        overall_statuses=labels.OVERALL_STATUS_LABELS,
    )


@router.post(
    "",
    response_model=InspectionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record an inspection",
)
async def create_inspection_endpoint(
    payload: InspectionCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> InspectionRead:
    """
    Record an inspection of one APAR with its full checklist.
    The authenticated user is stored as the inspector.
    """
    try:
        inspection = await db_manager.create_inspection(
            db,
            inspector_id=current_user.id,
            apar_id=payload.apar_id,
            inspection_date=payload.inspection_date,
            items=[item.model_dump() for item in payload.items],
            overall_status=payload.overall_status,
            digital_signature=payload.digital_signature,
            notes=payload.notes,
        )
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "errors": exc.errors},
        ) from exc
    except TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return InspectionRead.model_validate(inspection)


@router.get(
    "/{inspection_id}",
    response_model=InspectionRead,
    summary="Get an inspection with its checklist",
)
async def get_inspection_endpoint(
    inspection_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> InspectionRead:
    try:
        inspection = await db_manager.get_inspection(db, inspection_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return InspectionRead.model_validate(inspection)


@router.put(
    "/{inspection_id}",
    response_model=InspectionRead,
    summary="Update an inspection and replace its checklist",
)
async def update_inspection_endpoint(
    inspection_id: int,
    payload: InspectionUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> InspectionRead:
    try:
        inspection = await db_manager.update_inspection(
            db,
            inspection_id,
            apar_id=payload.apar_id,
            inspection_date=payload.inspection_date,
            items=[item.model_dump() for item in payload.items],
            overall_status=payload.overall_status,
            digital_signature=payload.digital_signature,
            notes=payload.notes,
        )
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "errors": exc.errors},
        ) from exc
    except TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return InspectionRead.model_validate(inspection)


@router.delete(
    "/{inspection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an inspection",
)
async def delete_inspection_endpoint(
    inspection_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await db_manager.delete_inspection(db, inspection_id)
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
