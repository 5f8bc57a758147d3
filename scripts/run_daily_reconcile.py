from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone

from fitstreak.core.config import get_settings
from fitstreak.core.logging import configure_logging
from fitstreak.workers.asyncio_runner import run_async_job
from fitstreak.workers.tasks.gamification_daily import run_daily_gamification_reconcile_async


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the daily gamification reconcile once, outside Celery")
    parser.add_argument("--at", default=None, help="ISO datetime used as the run clock (UTC assumed)")
    parser.add_argument("--batch-size", type=int, default=None)
    return parser.parse_args()


def _parse_run_clock(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def main() -> int:
    args = _parse_args()
    configure_logging(get_settings().log_level)
    result = run_async_job(
        run_daily_gamification_reconcile_async(
            now_utc=_parse_run_clock(args.at),
            batch_size=args.batch_size,
        )
    )
    print(json.dumps(result, sort_keys=True))  # noqa: T201
    return 0 if result["users_failed"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
