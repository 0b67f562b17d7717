# api/dashboard/db_manager.py
"""
Business logic for the officer dashboard.
"""
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from core import inspection_rules as rules
from db_models.apar import AparStatus
from . import queries


async def _scalar(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar() or 0


async def get_apar_stats(db: AsyncSession, today: date | None = None) -> dict:
    """
    APAR counts for the dashboard cards.

    'expiring_soon' covers [today, today + 90 days); already expired units
    are counted separately.
    """
    today = today or date.today()
    window_start, window_end = rules.expiry_window(today)

    return {
        "total_apars": await _scalar(db, queries.count_total_apars()),
        "active_apars": await _scalar(db, queries.count_apars_with_status(AparStatus.ACTIVE.value)),
        "expired_apars": await _scalar(db, queries.count_expired_apars(today)),
        "expiring_soon": await _scalar(
            db, queries.count_apars_expiring_between(window_start, window_end)
        ),
    }


async def get_monthly_inspections(db: AsyncSession, today: date | None = None) -> list[dict]:
    """Inspection counts per month of the current year; empty months are omitted."""
    year_start, year_end = rules.year_bounds(today)
    result = await db.execute(queries.count_inspections_per_month(year_start, year_end))
    return [{"month": int(row.month), "count": row.total} for row in result]


async def get_status_distribution(db: AsyncSession) -> list[dict]:
    result = await db.execute(queries.count_apars_per_status())
    return [{"status": row.status, "count": row.total} for row in result]


async def get_recent_inspections(db: AsyncSession, limit: int = 5) -> list:
    result = await db.execute(queries.select_recent_inspections(limit))
    return list(result.scalars().all())


async def get_dashboard(db: AsyncSession, today: date | None = None) -> dict:
    """Everything the officer dashboard shows, in one call."""
    today = today or date.today()
    return {
        "stats": await get_apar_stats(db, today),
        "recent_inspections": await get_recent_inspections(db),
        "monthly_inspections": await get_monthly_inspections(db, today),
        "apar_status_distribution": await get_status_distribution(db),
    }
