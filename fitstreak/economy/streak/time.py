from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from fitstreak.economy.streak.constants import WEEKLY_XP_RESET_ISOWEEKDAY


def utc_date(now_utc: datetime) -> date:
    """Calendar day of an aware datetime in UTC."""
    return now_utc.astimezone(timezone.utc).date()


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def is_weekly_reset_day(day: date) -> bool:
    return day.isoweekday() == WEEKLY_XP_RESET_ISOWEEKDAY
