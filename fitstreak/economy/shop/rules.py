from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from fitstreak.economy.errors import (
    InsufficientGemsError,
    InvalidQuantityError,
    ShopItemDisabledError,
)
from fitstreak.economy.shop.catalog import get_side_effects
from fitstreak.economy.shop.types import AppliedMutation
from fitstreak.economy.state import GamificationSnapshot


class PurchasableItem(Protocol):
    id: str
    cost_in_gems: int
    is_disabled: bool


def validate_quantity(quantity: object) -> int:
    # bool is an int subclass; True must not read as quantity 1.
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError
    if quantity <= 0:
        raise InvalidQuantityError
    return quantity


def ensure_item_enabled(item: PurchasableItem) -> None:
    if item.is_disabled:
        raise ShopItemDisabledError


def total_cost(item: PurchasableItem, quantity: int) -> int:
    return item.cost_in_gems * quantity


def apply_purchase(
    snapshot: GamificationSnapshot,
    *,
    item: PurchasableItem,
    quantity: int,
) -> tuple[GamificationSnapshot, list[AppliedMutation]]:
    """Debits gems and applies the item's declared side effects to the snapshot."""
    cost = total_cost(item, quantity)
    if cost > snapshot.gems_balance:
        raise InsufficientGemsError

    updated = replace(snapshot, gems_balance=snapshot.gems_balance - cost)

    applied: list[AppliedMutation] = []
    for mutation in get_side_effects(item.id):
        amount = mutation.delta * quantity if mutation.per_unit else mutation.delta
        new_value = getattr(updated, mutation.field) + amount
        updated = replace(updated, **{mutation.field: new_value})
        applied.append(AppliedMutation(field=mutation.field, amount=amount, balance_after=new_value))

    return updated, applied
