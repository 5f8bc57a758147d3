from __future__ import annotations

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from fitstreak.db.models.gamification_state import GamificationState
from fitstreak.db.models.owned_items import OwnedItem
from fitstreak.db.models.shop_items import ShopItem
from fitstreak.economy.errors import (
    InsufficientGemsError,
    InvalidQuantityError,
    ShopItemDisabledError,
    ShopItemNotFoundError,
    UserNotFoundError,
)
from fitstreak.economy.shop import service as shop_service
from fitstreak.economy.shop.service import ShopService

NOW_UTC = datetime(2026, 10, 21, 9, 30, tzinfo=timezone.utc)


def _session() -> SimpleNamespace:
    async def _flush() -> None:
        return None

    return SimpleNamespace(flush=_flush)


def _shop_item(item_id: str, cost: int, *, disabled: bool = False, name: str | None = None) -> ShopItem:
    return ShopItem(
        id=item_id,
        name=name or item_id.title(),
        description="",
        cost_in_gems=cost,
        category="potion",
        item_type="consumable",
        is_disabled=disabled,
        image_url="",
        created_at=NOW_UTC,
        updated_at=NOW_UTC,
    )


def _state(*, gems: int, freezes: int = 0) -> GamificationState:
    return GamificationState(
        user_id="user-1",
        current_streak=4,
        longest_streak=6,
        last_activity_date=date(2026, 10, 20),
        gems_balance=gems,
        xp_total=0,
        xp_weekly=0,
        streak_freezes=freezes,
        is_streak_protected=False,
        streak_freeze_usage_dates=[],
        streak_repair_dates=[],
        streak_reset_dates=[],
        updated_at=NOW_UTC,
    )


@pytest.fixture
def shop_env(monkeypatch):
    env = SimpleNamespace(items={}, state=None, owned={}, ledger=[])

    async def _get_item(session, item_id: str):
        del session
        return env.items.get(item_id)

    async def _get_state(session, user_id: str):
        del session, user_id
        return env.state

    async def _get_or_create(session, *, user_id: str, item_id: str, now_utc: datetime):
        del session
        if item_id not in env.owned:
            env.owned[item_id] = OwnedItem(
                user_id=user_id,
                shop_item_id=item_id,
                quantity=0,
                purchased_at=now_utc,
                updated_at=now_utc,
            )
        return env.owned[item_id]

    async def _create_entry(session, *, entry):
        del session
        env.ledger.append(entry)
        return entry

    monkeypatch.setattr(shop_service.ShopItemsRepo, "get_by_id", _get_item)
    monkeypatch.setattr(shop_service.GamificationRepo, "get_by_user_id", _get_state)
    monkeypatch.setattr(shop_service.OwnedItemsRepo, "get_or_create", _get_or_create)
    monkeypatch.setattr(shop_service.LedgerRepo, "create", _create_entry)
    return env


@pytest.mark.asyncio
async def test_purchase_debits_gems_upserts_inventory_and_grants_freezes(shop_env) -> None:
    shop_env.items["STREAK_FREEZE_POTION"] = _shop_item(
        "STREAK_FREEZE_POTION",
        300,
        name="Streak Freeze Potion",
    )
    shop_env.state = _state(gems=1000, freezes=1)

    result = await ShopService.purchase_item(
        _session(),
        user_id="user-1",
        item_id="STREAK_FREEZE_POTION",
        quantity=2,
        now_utc=NOW_UTC,
    )

    assert result.success is True
    assert result.message == "Successfully purchased Streak Freeze Potion!"
    assert result.gems_balance == 400
    assert result.owned_quantity == 2
    assert shop_env.state.gems_balance == 400
    assert shop_env.state.streak_freezes == 3
    assert shop_env.owned["STREAK_FREEZE_POTION"].quantity == 2
    assert [(e.asset, e.direction, e.amount) for e in shop_env.ledger] == [
        ("GEMS", "DEBIT", 600),
        ("SHOP_ITEM", "CREDIT", 2),
        ("STREAK_FREEZE", "CREDIT", 2),
    ]


@pytest.mark.asyncio
async def test_repeat_purchase_accumulates_quantity_and_keeps_first_purchase_time(shop_env) -> None:
    shop_env.items["AI_WISDOM_BOOST"] = _shop_item("AI_WISDOM_BOOST", 400)
    shop_env.state = _state(gems=1200)

    await ShopService.purchase_item(
        _session(),
        user_id="user-1",
        item_id="AI_WISDOM_BOOST",
        quantity=1,
        now_utc=NOW_UTC,
    )
    later = NOW_UTC.replace(hour=18)
    result = await ShopService.purchase_item(
        _session(),
        user_id="user-1",
        item_id="AI_WISDOM_BOOST",
        quantity=2,
        now_utc=later,
    )

    owned = shop_env.owned["AI_WISDOM_BOOST"]
    assert result.owned_quantity == 3
    assert owned.purchased_at == NOW_UTC
    assert owned.updated_at == later
    assert shop_env.state.gems_balance == 0
    assert shop_env.state.streak_freezes == 0


@pytest.mark.asyncio
async def test_unknown_item_is_not_found(shop_env) -> None:
    shop_env.state = _state(gems=1000)

    with pytest.raises(ShopItemNotFoundError):
        await ShopService.purchase_item(
            _session(),
            user_id="user-1",
            item_id="NOPE",
            quantity=1,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_disabled_item_is_checked_before_quantity(shop_env) -> None:
    shop_env.items["TIME_TURNER"] = _shop_item("TIME_TURNER", 500, disabled=True)
    shop_env.state = _state(gems=1000)

    with pytest.raises(ShopItemDisabledError):
        await ShopService.purchase_item(
            _session(),
            user_id="user-1",
            item_id="TIME_TURNER",
            quantity=0,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_invalid_quantity_is_rejected(shop_env) -> None:
    shop_env.items["MOTIVATION_DROP"] = _shop_item("MOTIVATION_DROP", 300)
    shop_env.state = _state(gems=1000)

    with pytest.raises(InvalidQuantityError):
        await ShopService.purchase_item(
            _session(),
            user_id="user-1",
            item_id="MOTIVATION_DROP",
            quantity=True,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_missing_user_is_not_found(shop_env) -> None:
    shop_env.items["MOTIVATION_DROP"] = _shop_item("MOTIVATION_DROP", 300)

    with pytest.raises(UserNotFoundError):
        await ShopService.purchase_item(
            _session(),
            user_id="ghost",
            item_id="MOTIVATION_DROP",
            quantity=1,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_insufficient_gems_leaves_state_untouched(shop_env) -> None:
    shop_env.items["STREAK_REVIVAL_ELIXIR"] = _shop_item("STREAK_REVIVAL_ELIXIR", 800)
    shop_env.state = _state(gems=799)

    with pytest.raises(InsufficientGemsError):
        await ShopService.purchase_item(
            _session(),
            user_id="user-1",
            item_id="STREAK_REVIVAL_ELIXIR",
            quantity=1,
            now_utc=NOW_UTC,
        )

    assert shop_env.state.gems_balance == 799
    assert shop_env.state.streak_freezes == 0
    assert shop_env.owned == {}
    assert shop_env.ledger == []


@pytest.mark.asyncio
async def test_owned_items_skip_entries_missing_from_catalog(monkeypatch) -> None:
    rows = [
        OwnedItem(user_id="user-1", shop_item_id="STREAK_FREEZE_POTION", quantity=2, purchased_at=NOW_UTC),
        OwnedItem(user_id="user-1", shop_item_id="RETIRED_ITEM", quantity=1, purchased_at=NOW_UTC),
        OwnedItem(user_id="user-1", shop_item_id="STREAK_REVIVAL_ELIXIR", quantity=0, purchased_at=NOW_UTC),
    ]

    async def _list_for_user(session, user_id: str):
        del session, user_id
        return rows

    async def _map_by_ids(session, item_ids):
        del session
        assert set(item_ids) == {"STREAK_FREEZE_POTION", "RETIRED_ITEM", "STREAK_REVIVAL_ELIXIR"}
        return {
            "STREAK_FREEZE_POTION": _shop_item("STREAK_FREEZE_POTION", 300),
            "STREAK_REVIVAL_ELIXIR": _shop_item("STREAK_REVIVAL_ELIXIR", 800),
        }

    monkeypatch.setattr(shop_service.OwnedItemsRepo, "list_for_user", _list_for_user)
    monkeypatch.setattr(shop_service.ShopItemsRepo, "map_by_ids", _map_by_ids)

    views = await ShopService.get_owned_items(_session(), user_id="user-1")

    assert [(view.id, view.quantity) for view in views] == [
        ("STREAK_FREEZE_POTION", 2),
        ("STREAK_REVIVAL_ELIXIR", 0),
    ]
    assert views[0].cost_in_gems == 300


@pytest.mark.asyncio
async def test_catalog_passes_include_disabled_flag(monkeypatch) -> None:
    calls: list[bool] = []

    async def _list_items(session, *, include_disabled: bool):
        del session
        calls.append(include_disabled)
        return [_shop_item("MOTIVATION_DROP", 300)]

    monkeypatch.setattr(shop_service.ShopItemsRepo, "list_items", _list_items)

    default_items = await ShopService.get_shop_catalog(_session())
    await ShopService.get_shop_catalog(_session(), include_disabled=True)

    assert calls == [False, True]
    assert default_items[0].id == "MOTIVATION_DROP"
    assert default_items[0].type == "consumable"


@pytest.mark.asyncio
async def test_seed_catalog_creates_missing_items_and_refreshes_existing(monkeypatch) -> None:
    existing = _shop_item("STREAK_FREEZE_POTION", 999, name="Old Name")
    created: list[ShopItem] = []

    async def _get_item(session, item_id: str):
        del session
        return existing if item_id == "STREAK_FREEZE_POTION" else None

    async def _create(session, *, item: ShopItem):
        del session
        created.append(item)
        return item

    monkeypatch.setattr(shop_service.ShopItemsRepo, "get_by_id", _get_item)
    monkeypatch.setattr(shop_service.ShopItemsRepo, "create", _create)

    seeded = await ShopService.seed_catalog(
        _session(),
        now_utc=NOW_UTC,
        image_base_url="https://cdn.example.test",
    )

    assert seeded == 7
    assert len(created) == 6
    assert existing.cost_in_gems == 300
    assert existing.name == "Streak Freeze Potion"
    assert existing.image_url == "https://cdn.example.test/shop-items/STREAK_FREEZE_POTION.png"
    assert {item.id for item in created if item.is_disabled} == {"TIME_TURNER", "RECOVERY_KIT", "MYSTERY_BOX"}
