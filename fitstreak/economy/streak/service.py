from __future__ import annotations

from datetime import datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.core.config import get_settings
from fitstreak.db.models.activity_logs import ActivityLog
from fitstreak.db.models.gamification_state import GamificationState
from fitstreak.db.models.ledger_entries import LedgerEntry
from fitstreak.db.repo.activity_logs_repo import ActivityLogsRepo
from fitstreak.db.repo.gamification_repo import GamificationRepo
from fitstreak.db.repo.ledger_repo import LedgerRepo
from fitstreak.db.repo.owned_items_repo import OwnedItemsRepo
from fitstreak.economy.errors import RepairItemMissingError, UserNotFoundError
from fitstreak.economy.state import GamificationSnapshot, apply_snapshot_to_model, snapshot_from_model
from fitstreak.economy.streak.calendar import ActivityCalendar, build_activity_calendar, parse_calendar_range
from fitstreak.economy.streak.constants import REPAIR_ITEM_ID
from fitstreak.economy.streak.rules import ACTIVITY_REWARDS, apply_repair, parse_activity_type, record_activity
from fitstreak.economy.streak.time import utc_date
from fitstreak.economy.streak.types import ActivityLogView, ActivityRewardResult, StreakRepairResult

logger = structlog.get_logger(__name__)


class StreakService:
    @staticmethod
    async def _get_state(session: AsyncSession, user_id: str) -> GamificationState:
        state = await GamificationRepo.get_by_user_id(session, user_id)
        if state is None:
            raise UserNotFoundError
        return state

    @staticmethod
    def _repair_window() -> timedelta:
        return timedelta(hours=get_settings().streak_repair_window_hours)

    @staticmethod
    async def get_state(session: AsyncSession, *, user_id: str) -> GamificationSnapshot:
        state = await StreakService._get_state(session, user_id)
        return snapshot_from_model(state)

    @staticmethod
    async def repair_streak(
        session: AsyncSession,
        *,
        user_id: str,
        now_utc: datetime,
    ) -> StreakRepairResult:
        state = await StreakService._get_state(session, user_id)

        elixir = await OwnedItemsRepo.get(session, user_id=user_id, item_id=REPAIR_ITEM_ID)
        if elixir is None or elixir.quantity <= 0:
            raise RepairItemMissingError

        snapshot = apply_repair(
            snapshot_from_model(state),
            today=utc_date(now_utc),
            now_utc=now_utc,
            window=StreakService._repair_window(),
        )
        apply_snapshot_to_model(state, snapshot, now_utc)
        await session.flush()

        elixir.quantity -= 1
        elixir.updated_at = now_utc
        await session.flush()

        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=user_id,
                entry_type="STREAK_REPAIR",
                asset="SHOP_ITEM",
                direction="DEBIT",
                amount=1,
                balance_after=elixir.quantity,
                source="STREAK_REPAIR",
                item_id=REPAIR_ITEM_ID,
                metadata_={"restored_streak": snapshot.current_streak},
                created_at=now_utc,
            ),
        )

        logger.info(
            "streak_repaired",
            user_id=user_id,
            restored_streak=snapshot.current_streak,
            elixirs_left=elixir.quantity,
        )
        return StreakRepairResult(
            success=True,
            message="Your streak has been restored!",
            restored_streak=snapshot.current_streak,
            elixirs_left=elixir.quantity,
        )

    @staticmethod
    async def record_activity(
        session: AsyncSession,
        *,
        user_id: str,
        activity_type: object,
        now_utc: datetime,
        details: dict[str, object] | None = None,
    ) -> ActivityRewardResult:
        parsed_type = parse_activity_type(activity_type)
        reward = ACTIVITY_REWARDS[parsed_type]
        state = await StreakService._get_state(session, user_id)

        activity_day = utc_date(now_utc)
        snapshot, counted = record_activity(
            snapshot_from_model(state),
            activity_type=parsed_type,
            activity_day=activity_day,
        )
        apply_snapshot_to_model(state, snapshot, now_utc)
        await session.flush()

        await ActivityLogsRepo.create(
            session,
            log=ActivityLog(
                user_id=user_id,
                activity_type=parsed_type.value,
                activity_date=activity_day,
                status="attended" if reward.counts_for_streak else "skipped",
                xp_awarded=reward.xp,
                gems_awarded=reward.gems,
                details=dict(details or {}),
                created_at=now_utc,
            ),
        )
        for asset, amount, balance_after in (
            ("XP", reward.xp, snapshot.xp_total),
            ("GEMS", reward.gems, snapshot.gems_balance),
        ):
            if amount <= 0:
                continue
            await LedgerRepo.create(
                session,
                entry=LedgerEntry(
                    user_id=user_id,
                    entry_type="ACTIVITY_REWARD",
                    asset=asset,
                    direction="CREDIT",
                    amount=amount,
                    balance_after=balance_after,
                    source="ACTIVITY",
                    item_id=None,
                    metadata_={"activity_type": parsed_type.value},
                    created_at=now_utc,
                ),
            )

        logger.info(
            "activity_recorded",
            user_id=user_id,
            activity_type=parsed_type.value,
            xp_awarded=reward.xp,
            gems_awarded=reward.gems,
            counted_for_streak=counted,
            current_streak=snapshot.current_streak,
        )
        return ActivityRewardResult(
            activity_type=parsed_type,
            xp_awarded=reward.xp,
            gems_awarded=reward.gems,
            counted_for_streak=counted,
            current_streak=snapshot.current_streak,
            longest_streak=snapshot.longest_streak,
            gems_balance=snapshot.gems_balance,
            xp_total=snapshot.xp_total,
            xp_weekly=snapshot.xp_weekly,
        )

    @staticmethod
    async def get_activity_calendar(
        session: AsyncSession,
        *,
        user_id: str,
        start_date: object,
        end_date: object,
    ) -> ActivityCalendar:
        first_day, last_day = parse_calendar_range(start_date, end_date)
        await StreakService._get_state(session, user_id)

        rows = await ActivityLogsRepo.list_for_user_between(
            session,
            user_id=user_id,
            start_date=first_day,
            end_date=last_day,
        )
        logs = [
            ActivityLogView(
                id=row.id,
                activity_type=row.activity_type,
                activity_date=row.activity_date,
                status=row.status,
                xp_awarded=row.xp_awarded,
                gems_awarded=row.gems_awarded,
                details=dict(row.details or {}),
                created_at=row.created_at,
            )
            for row in rows
        ]
        logger.info(
            "activity_calendar_loaded",
            user_id=user_id,
            start_date=first_day.isoformat(),
            end_date=last_day.isoformat(),
            logs=len(logs),
        )
        return build_activity_calendar(start_date=first_day, end_date=last_day, logs=logs)
