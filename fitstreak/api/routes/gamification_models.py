from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class EnsureUserRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=128)
    username: str | None = Field(default=None, max_length=128)
    preferred_language: str | None = Field(default=None, min_length=2, max_length=8)


class EnsureUserResponse(BaseModel):
    user_id: str
    created: bool
    gems_balance: int = Field(ge=0)
    current_streak: int = Field(ge=0)


class GamificationStateResponse(BaseModel):
    current_streak: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    last_activity_date: date | None = None
    gems_balance: int = Field(ge=0)
    xp_total: int = Field(ge=0)
    xp_weekly: int = Field(ge=0)
    streak_freezes: int = Field(ge=0)
    is_streak_protected: bool
    streak_freeze_usage_dates: list[date]
    streak_repair_dates: list[date]
    streak_reset_dates: list[date]
    lost_streak_value: int | None = None
    lost_streak_timestamp: datetime | None = None


class ActivityRequest(BaseModel):
    activity_type: str = Field(min_length=1, max_length=32)
    details: dict[str, Any] = Field(default_factory=dict)


class ActivityResponse(BaseModel):
    activity_type: str
    xp_awarded: int = Field(ge=0)
    gems_awarded: int = Field(ge=0)
    counted_for_streak: bool
    current_streak: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    gems_balance: int = Field(ge=0)


class ActivityLogResponse(BaseModel):
    id: int
    activity_type: str
    activity_date: date
    status: str
    xp_awarded: int = Field(ge=0)
    gems_awarded: int = Field(ge=0)
    details: dict[str, Any]
    created_at: datetime


class ActivityCalendarResponse(BaseModel):
    success: bool = True
    start_date: date
    end_date: date
    days: dict[str, list[ActivityLogResponse] | None]


class StreakRepairResponse(BaseModel):
    success: bool
    message: str
    restored_streak: int = Field(ge=0)
    elixirs_left: int = Field(ge=0)


class ShopItemResponse(BaseModel):
    id: str
    name: str
    description: str
    image_url: str
    category: str
    type: str
    cost_in_gems: int = Field(gt=0)
    is_disabled: bool


class ShopCatalogResponse(BaseModel):
    success: bool = True
    items: list[ShopItemResponse]


class OwnedItemResponse(ShopItemResponse):
    quantity: int = Field(ge=0)
    purchased_at: datetime


class OwnedItemsResponse(BaseModel):
    success: bool = True
    items: list[OwnedItemResponse]


class PurchaseRequest(BaseModel):
    item_id: str = Field(min_length=1, max_length=64)
    # Validated by the purchase rules so a missing value, booleans and non-integers map to E_INVALID_QUANTITY.
    quantity: Any = None


class PurchaseResponse(BaseModel):
    success: bool
    message: str
    item_id: str
    quantity: int = Field(gt=0)
    total_cost: int = Field(gt=0)
    gems_balance: int = Field(ge=0)
    owned_quantity: int = Field(ge=0)


class SeedCatalogResponse(BaseModel):
    success: bool
    message: str
    seeded_items: int = Field(ge=0)
