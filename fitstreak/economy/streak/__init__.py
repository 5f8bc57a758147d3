from fitstreak.economy.streak.service import StreakService

__all__ = ["StreakService"]
