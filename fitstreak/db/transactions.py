from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from fitstreak.core.config import get_settings
from fitstreak.db.session import SessionLocal
from fitstreak.economy.errors import InternalError, TransactionConflictError

logger = structlog.get_logger(__name__)
T = TypeVar("T")
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _is_conflict(exc: BaseException) -> bool:
    if isinstance(exc, StaleDataError):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return sqlstate in RETRYABLE_SQLSTATES
    return False


async def run_in_transaction(
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    operation: str,
    max_attempts: int | None = None,
) -> T:
    """Runs `work` in a fresh transaction, replaying it from scratch on write conflicts.

    Versioned rows make a concurrent commit surface as StaleDataError at flush or commit
    time; the whole read-validate-write cycle is then repeated against fresh state.
    """
    attempts = max_attempts if max_attempts is not None else get_settings().transaction_max_attempts
    for attempt in range(1, attempts + 1):
        try:
            async with SessionLocal.begin() as session:
                return await work(session)
        except SQLAlchemyError as exc:
            if not _is_conflict(exc):
                logger.exception("transaction_failed", operation=operation, attempt=attempt)
                raise InternalError(f"{operation} failed") from exc
            logger.warning("transaction_conflict_retry", operation=operation, attempt=attempt)

    logger.error("transaction_conflict_exhausted", operation=operation, attempts=attempts)
    raise TransactionConflictError(f"{operation} kept conflicting")
