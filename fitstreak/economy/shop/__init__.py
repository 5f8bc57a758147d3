from fitstreak.economy.shop.service import ShopService

__all__ = ["ShopService"]
