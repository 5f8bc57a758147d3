from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.gamification_state import GamificationState


class GamificationRepo:
    @staticmethod
    async def get_by_user_id(session: AsyncSession, user_id: str) -> GamificationState | None:
        return await session.get(GamificationState, user_id)

    @staticmethod
    async def get_or_create_state(
        session: AsyncSession,
        *,
        user_id: str,
        now_utc: datetime,
    ) -> GamificationState:
        """Returns the user's state row, inserting a zeroed one when missing."""
        stmt = (
            insert(GamificationState)
            .values(
                user_id=user_id,
                current_streak=0,
                longest_streak=0,
                last_activity_date=None,
                gems_balance=0,
                xp_total=0,
                xp_weekly=0,
                streak_freezes=0,
                is_streak_protected=False,
                streak_freeze_usage_dates=[],
                streak_repair_dates=[],
                streak_reset_dates=[],
                version=1,
                updated_at=now_utc,
            )
            .on_conflict_do_nothing(index_elements=[GamificationState.user_id])
        )
        await session.execute(stmt)

        result = await session.execute(
            select(GamificationState)
            .where(GamificationState.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    @staticmethod
    async def list_due_for_reconcile(
        session: AsyncSession,
        *,
        today: date,
        after_user_id: str | None,
        limit: int,
    ) -> list[GamificationState]:
        """Keyset page of users with activity history not yet reconciled for `today`."""
        stmt = (
            select(GamificationState)
            .where(
                GamificationState.last_activity_date.is_not(None),
                or_(
                    GamificationState.last_reconciled_date.is_(None),
                    GamificationState.last_reconciled_date < today,
                ),
            )
            .order_by(GamificationState.user_id.asc())
            .limit(limit)
        )
        if after_user_id is not None:
            stmt = stmt.where(GamificationState.user_id > after_user_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())
