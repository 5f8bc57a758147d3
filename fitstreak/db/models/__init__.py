from fitstreak.db.models.activity_logs import ActivityLog
from fitstreak.db.models.gamification_state import GamificationState
from fitstreak.db.models.ledger_entries import LedgerEntry
from fitstreak.db.models.owned_items import OwnedItem
from fitstreak.db.models.reconciliation_runs import ReconciliationRun
from fitstreak.db.models.shop_items import ShopItem
from fitstreak.db.models.users import User

__all__ = [
    "ActivityLog",
    "GamificationState",
    "LedgerEntry",
    "OwnedItem",
    "ReconciliationRun",
    "ShopItem",
    "User",
]
