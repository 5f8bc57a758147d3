from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class ActivityType(str, Enum):
    GYM_WORKOUT = "gym_workout"
    CUSTOM_ACTIVITY = "custom_activity"
    DAILY_CHECKIN = "daily_checkin"
    EXCUSE_LOGGED = "excuse_logged"


class ReconcileEventType(str, Enum):
    PROTECTION_CLEARED = "PROTECTION_CLEARED"
    FREEZE_CONSUMED = "FREEZE_CONSUMED"
    STREAK_RESET = "STREAK_RESET"
    WEEKLY_XP_RESET = "WEEKLY_XP_RESET"


@dataclass(frozen=True, slots=True)
class ReconcileEvent:
    event_type: ReconcileEventType
    day: date
    details: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ActivityReward:
    xp: int
    gems: int
    counts_for_streak: bool


@dataclass(slots=True)
class ActivityRewardResult:
    activity_type: ActivityType
    xp_awarded: int
    gems_awarded: int
    counted_for_streak: bool
    current_streak: int
    longest_streak: int
    gems_balance: int
    xp_total: int
    xp_weekly: int


@dataclass(slots=True)
class StreakRepairResult:
    success: bool
    message: str
    restored_streak: int
    elixirs_left: int


@dataclass(slots=True)
class ActivityLogView:
    id: int
    activity_type: str
    activity_date: date
    status: str
    xp_awarded: int
    gems_awarded: int
    details: dict[str, object]
    created_at: datetime
