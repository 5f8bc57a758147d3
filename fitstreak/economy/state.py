from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from fitstreak.db.models.gamification_state import GamificationState


@dataclass(slots=True)
class GamificationSnapshot:
    current_streak: int
    longest_streak: int
    last_activity_date: date | None
    gems_balance: int
    xp_total: int
    xp_weekly: int
    streak_freezes: int
    is_streak_protected: bool
    streak_freeze_usage_dates: tuple[date, ...]
    streak_repair_dates: tuple[date, ...]
    streak_reset_dates: tuple[date, ...]
    lost_streak_value: int | None
    lost_streak_timestamp: datetime | None
    last_reconciled_date: date | None


def snapshot_from_model(state: GamificationState) -> GamificationSnapshot:
    return GamificationSnapshot(
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        last_activity_date=state.last_activity_date,
        gems_balance=state.gems_balance,
        xp_total=state.xp_total,
        xp_weekly=state.xp_weekly,
        streak_freezes=state.streak_freezes,
        is_streak_protected=state.is_streak_protected,
        streak_freeze_usage_dates=tuple(state.streak_freeze_usage_dates or ()),
        streak_repair_dates=tuple(state.streak_repair_dates or ()),
        streak_reset_dates=tuple(state.streak_reset_dates or ()),
        lost_streak_value=state.lost_streak_value,
        lost_streak_timestamp=state.lost_streak_timestamp,
        last_reconciled_date=state.last_reconciled_date,
    )


def apply_snapshot_to_model(state: GamificationState, snapshot: GamificationSnapshot, now_utc: datetime) -> None:
    state.current_streak = snapshot.current_streak
    state.longest_streak = snapshot.longest_streak
    state.last_activity_date = snapshot.last_activity_date
    state.gems_balance = snapshot.gems_balance
    state.xp_total = snapshot.xp_total
    state.xp_weekly = snapshot.xp_weekly
    state.streak_freezes = snapshot.streak_freezes
    state.is_streak_protected = snapshot.is_streak_protected
    state.streak_freeze_usage_dates = list(snapshot.streak_freeze_usage_dates)
    state.streak_repair_dates = list(snapshot.streak_repair_dates)
    state.streak_reset_dates = list(snapshot.streak_reset_dates)
    state.lost_streak_value = snapshot.lost_streak_value
    state.lost_streak_timestamp = snapshot.lost_streak_timestamp
    state.last_reconciled_date = snapshot.last_reconciled_date
    state.updated_at = now_utc
