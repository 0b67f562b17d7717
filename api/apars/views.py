# api/apars/views.py
"""
APAR (fire extinguisher) registry endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core import labels
from core.deps import CurrentUser
from core.exceptions import NotFoundError, TransactionError, ValidationError
from .models import (
    AparCreate,
    AparUpdate,
    AparRead,
    AparDetail,
    AparListResponse,
    AparOptions,
)
from . import db_manager

router = APIRouter(prefix="/apars", tags=["apars"])


@router.get(
    "",
    response_model=AparListResponse,
    summary="List APARs",
)
async def list_apars_endpoint(
    current_user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    status_filter: str | None = Query(None, alias="status", description="Only APARs with this status"),
    q: str | None = Query(None, description="Search in number or location"),
    db: AsyncSession = Depends(get_session),
) -> AparListResponse:
    """
    List APARs ordered by number, one page at a time.
    """
    apars, total = await db_manager.list_apars(
        db, skip=skip, limit=limit, status=status_filter, search=q
    )
    return AparListResponse(
        apars=[AparRead.model_validate(a) for a in apars],
        total=total,
    )


@router.get(
    "/options",
    response_model=AparOptions,
    summary="Type and status choices for APAR forms",
)
async def apar_options_endpoint(current_user: CurrentUser) -> AparOptions:
    return AparOptions(types=labels.APAR_TYPE_LABELS, statuses=labels.APAR_STATUS_LABELS)


@router.post(
    "",
    response_model=AparRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register an APAR",
)
async def create_apar_endpoint(
    payload: AparCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> AparRead:
    """
    Register a new fire extinguisher. The number must be unique and the
    expiry date must fall after the fill date.
    """
    try:
        apar = await db_manager.create_apar(db, payload.model_dump())
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

    return AparRead.model_validate(apar)


@router.get(
    "/{apar_id}",
    response_model=AparDetail,
    summary="Get an APAR with its inspection history",
)
async def get_apar_endpoint(
    apar_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> AparDetail:
    try:
        apar = await db_manager.get_apar(db, apar_id, with_inspections=True)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return AparDetail.model_validate(apar)


@router.put(
    "/{apar_id}",
    response_model=AparRead,
    summary="Update an APAR",
)
async def update_apar_endpoint(
    apar_id: int,
    payload: AparUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> AparRead:
    try:
        apar = await db_manager.update_apar(db, apar_id, payload.model_dump())
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

    return AparRead.model_validate(apar)


@router.delete(
    "/{apar_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an APAR and its inspections",
)
async def delete_apar_endpoint(
    apar_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Permanently delete an APAR together with every inspection recorded for it.
    """
    try:
        await db_manager.delete_apar(db, apar_id)
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
