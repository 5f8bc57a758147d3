from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

from fitstreak.economy.errors import InvalidActivityTypeError, NothingToRepairError, RepairWindowExpiredError
from fitstreak.economy.state import GamificationSnapshot
from fitstreak.economy.streak.time import is_weekly_reset_day, previous_day
from fitstreak.economy.streak.types import (
    ActivityReward,
    ActivityType,
    ReconcileEvent,
    ReconcileEventType,
)

ACTIVITY_REWARDS: dict[ActivityType, ActivityReward] = {
    ActivityType.GYM_WORKOUT: ActivityReward(xp=30, gems=10, counts_for_streak=True),
    ActivityType.CUSTOM_ACTIVITY: ActivityReward(xp=30, gems=10, counts_for_streak=True),
    ActivityType.DAILY_CHECKIN: ActivityReward(xp=10, gems=2, counts_for_streak=True),
    ActivityType.EXCUSE_LOGGED: ActivityReward(xp=0, gems=0, counts_for_streak=False),
}


def reconcile_day(
    snapshot: GamificationSnapshot,
    *,
    today: date,
    now_utc: datetime,
) -> tuple[GamificationSnapshot, list[ReconcileEvent]]:
    """Applies the once-a-day streak and weekly XP rules for `today` (UTC).

    Returns the snapshot unchanged when the user has no activity history or was
    already reconciled for `today`, so running twice on one day is a no-op.
    """
    if snapshot.last_activity_date is None:
        return snapshot, []
    if snapshot.last_reconciled_date is not None and snapshot.last_reconciled_date >= today:
        return snapshot, []

    events: list[ReconcileEvent] = []
    updated = snapshot

    if updated.is_streak_protected:
        updated = replace(updated, is_streak_protected=False)
        events.append(ReconcileEvent(ReconcileEventType.PROTECTION_CLEARED, today))

    missed_yesterday = updated.last_activity_date < previous_day(today)
    # A streak already at zero has nothing left to protect or lose.
    if missed_yesterday and updated.current_streak > 0:
        if updated.streak_freezes > 0:
            updated = replace(
                updated,
                streak_freezes=updated.streak_freezes - 1,
                is_streak_protected=True,
                streak_freeze_usage_dates=(*updated.streak_freeze_usage_dates, today),
            )
            events.append(
                ReconcileEvent(
                    ReconcileEventType.FREEZE_CONSUMED,
                    today,
                    {"freezes_left": updated.streak_freezes},
                )
            )
        else:
            lost = updated.current_streak
            updated = replace(
                updated,
                current_streak=0,
                lost_streak_value=lost,
                lost_streak_timestamp=now_utc,
                streak_reset_dates=(*updated.streak_reset_dates, today),
            )
            events.append(
                ReconcileEvent(ReconcileEventType.STREAK_RESET, today, {"lost_streak_value": lost})
            )

    if is_weekly_reset_day(today):
        events.append(
            ReconcileEvent(ReconcileEventType.WEEKLY_XP_RESET, today, {"xp_weekly_before": updated.xp_weekly})
        )
        updated = replace(updated, xp_weekly=0)

    return replace(updated, last_reconciled_date=today), events


def is_within_repair_window(
    lost_streak_timestamp: datetime,
    *,
    now_utc: datetime,
    window: timedelta,
) -> bool:
    return now_utc - lost_streak_timestamp <= window


def apply_repair(
    snapshot: GamificationSnapshot,
    *,
    today: date,
    now_utc: datetime,
    window: timedelta,
) -> GamificationSnapshot:
    if snapshot.lost_streak_value is None or snapshot.lost_streak_timestamp is None:
        raise NothingToRepairError
    if not is_within_repair_window(snapshot.lost_streak_timestamp, now_utc=now_utc, window=window):
        raise RepairWindowExpiredError

    restored = snapshot.lost_streak_value
    return replace(
        snapshot,
        current_streak=restored,
        longest_streak=max(snapshot.longest_streak, restored),
        streak_repair_dates=(*snapshot.streak_repair_dates, today),
        lost_streak_value=None,
        lost_streak_timestamp=None,
    )


def parse_activity_type(raw: object) -> ActivityType:
    try:
        return ActivityType(raw)
    except ValueError as exc:
        raise InvalidActivityTypeError from exc


def record_activity(
    snapshot: GamificationSnapshot,
    *,
    activity_type: ActivityType,
    activity_day: date,
) -> tuple[GamificationSnapshot, bool]:
    """Credits the activity reward; only the first qualifying activity of a day extends the streak."""
    reward = ACTIVITY_REWARDS[activity_type]
    updated = replace(
        snapshot,
        xp_total=snapshot.xp_total + reward.xp,
        xp_weekly=snapshot.xp_weekly + reward.xp,
        gems_balance=snapshot.gems_balance + reward.gems,
    )
    if not reward.counts_for_streak:
        return updated, False
    if updated.last_activity_date is not None and updated.last_activity_date >= activity_day:
        return updated, False

    current_streak = updated.current_streak + 1
    updated = replace(
        updated,
        current_streak=current_streak,
        longest_streak=max(updated.longest_streak, current_streak),
        last_activity_date=activity_day,
    )
    return updated, True
