from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from celery.schedules import crontab
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.core.config import get_settings
from fitstreak.db.models.gamification_state import GamificationState
from fitstreak.db.models.ledger_entries import LedgerEntry
from fitstreak.db.repo.gamification_repo import GamificationRepo
from fitstreak.db.repo.ledger_repo import LedgerRepo
from fitstreak.db.repo.reconciliation_runs_repo import ReconciliationRunsRepo
from fitstreak.db.session import SessionLocal
from fitstreak.db.transactions import run_in_transaction
from fitstreak.economy.state import apply_snapshot_to_model, snapshot_from_model
from fitstreak.economy.streak.rules import reconcile_day
from fitstreak.economy.streak.time import utc_date
from fitstreak.economy.streak.types import ReconcileEvent, ReconcileEventType
from fitstreak.services.alerts import send_ops_alert
from fitstreak.workers.asyncio_runner import run_async_job
from fitstreak.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)

RUN_STATUS_OK = "OK"
RUN_STATUS_PARTIAL_FAILURE = "PARTIAL_FAILURE"


@dataclass(slots=True)
class _PageOutcome:
    examined: int = 0
    last_user_id: str | None = None
    failed_user_ids: list[str] = field(default_factory=list)
    events: Counter[str] = field(default_factory=Counter)


async def _reconcile_state(
    session: AsyncSession,
    state: GamificationState,
    *,
    today: date,
    now_utc: datetime,
) -> list[ReconcileEvent]:
    snapshot = snapshot_from_model(state)
    updated, events = reconcile_day(snapshot, today=today, now_utc=now_utc)
    if updated == snapshot:
        return []

    apply_snapshot_to_model(state, updated, now_utc)
    await session.flush()

    for event in events:
        if event.event_type != ReconcileEventType.FREEZE_CONSUMED:
            continue
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=state.user_id,
                entry_type="STREAK_FREEZE_CONSUMED",
                asset="STREAK_FREEZE",
                direction="DEBIT",
                amount=1,
                balance_after=updated.streak_freezes,
                source="DAILY_RECONCILE",
                item_id=None,
                metadata_={"day": today.isoformat()},
                created_at=now_utc,
            ),
        )
    return events


async def _reconcile_page(
    *,
    today: date,
    now_utc: datetime,
    after_user_id: str | None,
    batch_size: int,
) -> _PageOutcome:
    outcome = _PageOutcome()
    async with SessionLocal.begin() as session:
        states = await GamificationRepo.list_due_for_reconcile(
            session,
            today=today,
            after_user_id=after_user_id,
            limit=batch_size,
        )
        for state in states:
            user_id = state.user_id
            outcome.examined += 1
            outcome.last_user_id = user_id
            try:
                async with session.begin_nested():
                    events = await _reconcile_state(session, state, today=today, now_utc=now_utc)
            except Exception:
                logger.exception("gamification_reconcile_user_failed", user_id=user_id, day=today.isoformat())
                outcome.failed_user_ids.append(user_id)
                continue
            outcome.events.update(event.event_type.value for event in events)
    return outcome


async def _retry_user(*, user_id: str, today: date, now_utc: datetime) -> list[ReconcileEvent] | None:
    async def _work(session: AsyncSession) -> list[ReconcileEvent]:
        state = await GamificationRepo.get_by_user_id(session, user_id)
        if state is None:
            return []
        return await _reconcile_state(session, state, today=today, now_utc=now_utc)

    try:
        return await run_in_transaction(_work, operation="gamification_reconcile_user")
    except Exception:
        logger.exception("gamification_reconcile_user_retry_failed", user_id=user_id, day=today.isoformat())
        return None


async def run_daily_gamification_reconcile_async(
    *,
    now_utc: datetime | None = None,
    batch_size: int | None = None,
) -> dict[str, object]:
    """Runs the daily freeze-or-reset and weekly XP rules for every due user.

    Failures are isolated per user; users that still fail after one retry keep an old
    `last_reconciled_date` and are picked up again by the next run. A page that cannot be
    read or committed stops the paging; the run is still recorded as a partial failure.
    """
    started_at = now_utc or datetime.now(timezone.utc)
    today = utc_date(started_at)
    page_size = batch_size or get_settings().reconcile_batch_size

    examined = 0
    events: Counter[str] = Counter()
    failed_user_ids: list[str] = []
    pages_failed = 0
    after_user_id: str | None = None
    while True:
        try:
            page = await _reconcile_page(
                today=today,
                now_utc=started_at,
                after_user_id=after_user_id,
                batch_size=page_size,
            )
        except SQLAlchemyError:
            logger.exception(
                "gamification_reconcile_page_failed",
                after_user_id=after_user_id,
                day=today.isoformat(),
            )
            pages_failed += 1
            break
        examined += page.examined
        events.update(page.events)
        failed_user_ids.extend(page.failed_user_ids)
        if page.examined < page_size or page.last_user_id is None:
            break
        after_user_id = page.last_user_id

    still_failed: list[str] = []
    for user_id in failed_user_ids:
        retried_events = await _retry_user(user_id=user_id, today=today, now_utc=started_at)
        if retried_events is None:
            still_failed.append(user_id)
            continue
        events.update(event.event_type.value for event in retried_events)

    finished_at = datetime.now(timezone.utc)
    status = RUN_STATUS_PARTIAL_FAILURE if still_failed or pages_failed else RUN_STATUS_OK
    async with SessionLocal.begin() as session:
        await ReconciliationRunsRepo.create(
            session,
            run_date=today,
            started_at=started_at,
            finished_at=finished_at,
            status=status,
            users_examined=examined,
            users_updated=examined - len(still_failed),
            users_failed=len(still_failed),
        )

    result: dict[str, object] = {
        "run_date": today.isoformat(),
        "status": status,
        "users_examined": examined,
        "users_failed": len(still_failed),
        "users_recovered_on_retry": len(failed_user_ids) - len(still_failed),
        "pages_failed": pages_failed,
        "freezes_consumed": events[ReconcileEventType.FREEZE_CONSUMED.value],
        "streaks_reset": events[ReconcileEventType.STREAK_RESET.value],
        "weekly_xp_resets": events[ReconcileEventType.WEEKLY_XP_RESET.value],
    }
    if status == RUN_STATUS_PARTIAL_FAILURE:
        await send_ops_alert(
            event="gamification_reconcile_failures_detected",
            payload={**result, "failed_user_ids": still_failed[:50]},
        )
        logger.warning("gamification_reconcile_finished_with_failures", **result)
    else:
        logger.info("gamification_reconcile_finished", **result)
    return result


@celery_app.task(name="fitstreak.workers.tasks.gamification_daily.run_daily_gamification_reconcile")
def run_daily_gamification_reconcile() -> dict[str, object]:
    return run_async_job(run_daily_gamification_reconcile_async())


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
settings = get_settings()
celery_app.conf.beat_schedule.update(
    {
        "gamification-daily-reconcile": {
            "task": "fitstreak.workers.tasks.gamification_daily.run_daily_gamification_reconcile",
            "schedule": crontab(
                hour=settings.reconcile_schedule_hour_utc,
                minute=settings.reconcile_schedule_minute_utc,
            ),
            "options": {"queue": "q_normal"},
        },
    }
)
