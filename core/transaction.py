# core/transaction.py
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import TransactionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one transaction and commit it on exit.

    Any error inside the block or during commit rolls the whole transaction
    back. Database errors surface as TransactionError, so callers never leave
    partial rows behind.

        async with atomic(db, "create inspection"):
            db.add(inspection)
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.warning("Rolled back '%s': %s", action, exc)
        raise TransactionError(f"Could not {action}; no changes were saved") from exc
    except Exception:
        await db.rollback()
        raise
