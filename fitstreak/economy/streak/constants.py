from __future__ import annotations

from datetime import timedelta

from fitstreak.economy.shop.catalog import STREAK_REVIVAL_ELIXIR

REPAIR_ITEM_ID = STREAK_REVIVAL_ELIXIR
DEFAULT_REPAIR_WINDOW = timedelta(hours=48)

# ISO weekday on which xp_weekly restarts (Monday, UTC).
WEEKLY_XP_RESET_ISOWEEKDAY = 1

ACTIVITY_GYM_WORKOUT = "gym_workout"
ACTIVITY_CUSTOM = "custom_activity"
ACTIVITY_DAILY_CHECKIN = "daily_checkin"
ACTIVITY_EXCUSE_LOGGED = "excuse_logged"

# Longest range the activity calendar serves in one request, inclusive of both ends.
MAX_CALENDAR_DAYS = 366
