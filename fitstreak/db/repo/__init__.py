from fitstreak.db.repo.activity_logs_repo import ActivityLogsRepo
from fitstreak.db.repo.gamification_repo import GamificationRepo
from fitstreak.db.repo.ledger_repo import LedgerRepo
from fitstreak.db.repo.owned_items_repo import OwnedItemsRepo
from fitstreak.db.repo.reconciliation_runs_repo import ReconciliationRunsRepo
from fitstreak.db.repo.shop_items_repo import ShopItemsRepo
from fitstreak.db.repo.users_repo import UsersRepo

__all__ = [
    "ActivityLogsRepo",
    "GamificationRepo",
    "LedgerRepo",
    "OwnedItemsRepo",
    "ReconciliationRunsRepo",
    "ShopItemsRepo",
    "UsersRepo",
]
