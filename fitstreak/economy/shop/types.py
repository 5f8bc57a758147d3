from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class ShopItemView:
    id: str
    name: str
    description: str
    image_url: str
    category: str
    type: str
    cost_in_gems: int
    is_disabled: bool


@dataclass(slots=True)
class OwnedItemView:
    id: str
    name: str
    description: str
    image_url: str
    category: str
    type: str
    cost_in_gems: int
    is_disabled: bool
    quantity: int
    purchased_at: datetime


@dataclass(slots=True)
class AppliedMutation:
    field: str
    amount: int
    balance_after: int


@dataclass(slots=True)
class PurchaseResult:
    success: bool
    message: str
    item_id: str
    quantity: int
    total_cost: int
    gems_balance: int
    owned_quantity: int
    streak_freezes: int
