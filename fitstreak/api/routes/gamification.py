from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Query, Request

from fitstreak.api.routes.gamification_models import (
    ActivityCalendarResponse,
    ActivityLogResponse,
    ActivityRequest,
    ActivityResponse,
    EnsureUserRequest,
    EnsureUserResponse,
    GamificationStateResponse,
    StreakRepairResponse,
)
from fitstreak.api.routes.internal_helpers import as_http_exception, assert_internal_access
from fitstreak.db.transactions import run_in_transaction
from fitstreak.economy.errors import GamificationError
from fitstreak.economy.streak.service import StreakService
from fitstreak.services.user_provisioning import UserProvisioningService

router = APIRouter(tags=["gamification"])


@router.post("/v1/users", response_model=EnsureUserResponse)
async def ensure_user(payload: EnsureUserRequest, request: Request) -> EnsureUserResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_in_transaction(
            lambda session: UserProvisioningService.ensure_user(
                session,
                user_id=payload.user_id,
                username=payload.username,
                preferred_language=payload.preferred_language,
                now_utc=now_utc,
            ),
            operation="ensure_user",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    return EnsureUserResponse(
        user_id=result.user_id,
        created=result.created,
        gems_balance=result.gems_balance,
        current_streak=result.current_streak,
    )


@router.get("/v1/users/{user_id}/gamification", response_model=GamificationStateResponse)
async def get_gamification_state(user_id: str, request: Request) -> GamificationStateResponse:
    assert_internal_access(request)

    try:
        snapshot = await run_in_transaction(
            lambda session: StreakService.get_state(session, user_id=user_id),
            operation="get_gamification_state",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    return GamificationStateResponse(
        current_streak=snapshot.current_streak,
        longest_streak=snapshot.longest_streak,
        last_activity_date=snapshot.last_activity_date,
        gems_balance=snapshot.gems_balance,
        xp_total=snapshot.xp_total,
        xp_weekly=snapshot.xp_weekly,
        streak_freezes=snapshot.streak_freezes,
        is_streak_protected=snapshot.is_streak_protected,
        streak_freeze_usage_dates=list(snapshot.streak_freeze_usage_dates),
        streak_repair_dates=list(snapshot.streak_repair_dates),
        streak_reset_dates=list(snapshot.streak_reset_dates),
        lost_streak_value=snapshot.lost_streak_value,
        lost_streak_timestamp=snapshot.lost_streak_timestamp,
    )


@router.post("/v1/users/{user_id}/activities", response_model=ActivityResponse)
async def record_activity(user_id: str, payload: ActivityRequest, request: Request) -> ActivityResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_in_transaction(
            lambda session: StreakService.record_activity(
                session,
                user_id=user_id,
                activity_type=payload.activity_type,
                details=payload.details,
                now_utc=now_utc,
            ),
            operation="record_activity",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    return ActivityResponse(
        activity_type=result.activity_type.value,
        xp_awarded=result.xp_awarded,
        gems_awarded=result.gems_awarded,
        counted_for_streak=result.counted_for_streak,
        current_streak=result.current_streak,
        longest_streak=result.longest_streak,
        gems_balance=result.gems_balance,
    )


@router.get("/v1/users/{user_id}/activities", response_model=ActivityCalendarResponse)
async def get_activity_calendar(
    user_id: str,
    request: Request,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
) -> ActivityCalendarResponse:
    assert_internal_access(request)

    try:
        calendar = await run_in_transaction(
            lambda session: StreakService.get_activity_calendar(
                session,
                user_id=user_id,
                start_date=start_date,
                end_date=end_date,
            ),
            operation="get_activity_calendar",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    days = list(calendar)
    return ActivityCalendarResponse(
        start_date=days[0],
        end_date=days[-1],
        days={
            day.isoformat(): None if logs is None else [ActivityLogResponse(**asdict(log)) for log in logs]
            for day, logs in calendar.items()
        },
    )


@router.post("/v1/users/{user_id}/streak/repair", response_model=StreakRepairResponse)
async def repair_streak(user_id: str, request: Request) -> StreakRepairResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_in_transaction(
            lambda session: StreakService.repair_streak(session, user_id=user_id, now_utc=now_utc),
            operation="repair_streak",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    return StreakRepairResponse(
        success=result.success,
        message=result.message,
        restored_streak=result.restored_streak,
        elixirs_left=result.elixirs_left,
    )
