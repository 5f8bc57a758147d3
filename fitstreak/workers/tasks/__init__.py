from fitstreak.workers.tasks.gamification_daily import run_daily_gamification_reconcile

__all__ = [
    "run_daily_gamification_reconcile",
]
