from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.reconciliation_runs import ReconciliationRun


class ReconciliationRunsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        run_date: date,
        started_at: datetime,
        finished_at: datetime | None,
        status: str,
        users_examined: int,
        users_updated: int,
        users_failed: int,
    ) -> ReconciliationRun:
        run = ReconciliationRun(
            run_date=run_date,
            started_at=started_at,
            finished_at=finished_at,
            status=status,
            users_examined=users_examined,
            users_updated=users_updated,
            users_failed=users_failed,
        )
        session.add(run)
        await session.flush()
        return run

    @staticmethod
    async def list_for_date(session: AsyncSession, run_date: date) -> list[ReconciliationRun]:
        stmt = (
            select(ReconciliationRun)
            .where(ReconciliationRun.run_date == run_date)
            .order_by(ReconciliationRun.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
