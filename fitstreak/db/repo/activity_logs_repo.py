from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.activity_logs import ActivityLog


class ActivityLogsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, log: ActivityLog) -> ActivityLog:
        session.add(log)
        await session.flush()
        return log

    @staticmethod
    async def list_for_user_between(
        session: AsyncSession,
        *,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> list[ActivityLog]:
        stmt = (
            select(ActivityLog)
            .where(
                ActivityLog.user_id == user_id,
                ActivityLog.activity_date >= start_date,
                ActivityLog.activity_date <= end_date,
            )
            .order_by(ActivityLog.activity_date.asc(), ActivityLog.created_at.asc(), ActivityLog.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
