from __future__ import annotations

import pytest

from fitstreak.economy.shop import catalog
from fitstreak.economy.shop.catalog import (
    ITEM_SIDE_EFFECTS,
    ITEM_TYPES,
    SEED_ITEMS,
    StateMutation,
    build_image_url,
    get_seed_item,
    get_side_effects,
)


def test_seed_catalog_contains_streak_items() -> None:
    ids = {seed.item_id for seed in SEED_ITEMS}
    assert {"STREAK_FREEZE_POTION", "STREAK_REVIVAL_ELIXIR"}.issubset(ids)
    assert len(ids) == len(SEED_ITEMS) == 7


def test_seed_catalog_prices_and_disabled_flags() -> None:
    assert get_seed_item("STREAK_FREEZE_POTION").cost_in_gems == 300
    assert get_seed_item("STREAK_REVIVAL_ELIXIR").cost_in_gems == 800
    disabled = {seed.item_id for seed in SEED_ITEMS if seed.is_disabled}
    assert disabled == {"TIME_TURNER", "RECOVERY_KIT", "MYSTERY_BOX"}
    assert all(seed.cost_in_gems > 0 for seed in SEED_ITEMS)
    assert all(seed.item_type in ITEM_TYPES for seed in SEED_ITEMS)


def test_get_seed_item_returns_none_for_unknown_id() -> None:
    assert get_seed_item("UNKNOWN") is None


def test_side_effect_table_grants_freezes() -> None:
    potion = get_side_effects("STREAK_FREEZE_POTION")
    elixir = get_side_effects("STREAK_REVIVAL_ELIXIR")

    assert potion == (StateMutation(field="streak_freezes", delta=1, per_unit=True),)
    assert elixir == (StateMutation(field="streak_freezes", delta=1, per_unit=False),)
    assert get_side_effects("MOTIVATION_DROP") == ()
    assert set(ITEM_SIDE_EFFECTS) == {"STREAK_FREEZE_POTION", "STREAK_REVIVAL_ELIXIR"}


def test_side_effect_validation_rejects_currency_fields() -> None:
    with pytest.raises(ValueError, match="unsupported field"):
        catalog._validate_side_effects({"GEM_PACK": (StateMutation(field="gems_balance", delta=5, per_unit=True),)})

    with pytest.raises(ValueError, match="positive delta"):
        catalog._validate_side_effects({"CURSE": (StateMutation(field="streak_freezes", delta=-1, per_unit=True),)})


def test_build_image_url() -> None:
    assert build_image_url(base_url="", item_id="MYSTERY_BOX") == ""
    assert (
        build_image_url(base_url="https://cdn.example.test/assets/", item_id="MYSTERY_BOX")
        == "https://cdn.example.test/assets/shop-items/MYSTERY_BOX.png"
    )
