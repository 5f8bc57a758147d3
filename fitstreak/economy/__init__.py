from fitstreak.economy.shop import ShopService
from fitstreak.economy.streak import StreakService

__all__ = [
    "ShopService",
    "StreakService",
]
