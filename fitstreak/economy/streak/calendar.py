from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from fitstreak.economy.errors import InvalidDateRangeError
from fitstreak.economy.streak.constants import MAX_CALENDAR_DAYS
from fitstreak.economy.streak.types import ActivityLogView

ActivityCalendar = dict[date, list[ActivityLogView] | None]


def _parse_day(raw: object) -> date:
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidDateRangeError
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise InvalidDateRangeError from exc


def parse_calendar_range(start_raw: object, end_raw: object) -> tuple[date, date]:
    start_date = _parse_day(start_raw)
    end_date = _parse_day(end_raw)
    if end_date < start_date:
        raise InvalidDateRangeError
    if (end_date - start_date).days + 1 > MAX_CALENDAR_DAYS:
        raise InvalidDateRangeError
    return start_date, end_date


def build_activity_calendar(
    *,
    start_date: date,
    end_date: date,
    logs: Iterable[ActivityLogView],
) -> ActivityCalendar:
    """Maps every day of the range to its logs, or None when nothing was logged that day."""
    calendar: ActivityCalendar = {}
    day = start_date
    while day <= end_date:
        calendar[day] = None
        day += timedelta(days=1)

    for log in logs:
        if log.activity_date not in calendar:
            continue
        day_logs = calendar[log.activity_date]
        if day_logs is None:
            day_logs = calendar[log.activity_date] = []
        day_logs.append(log)
    return calendar
