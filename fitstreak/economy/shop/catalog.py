from __future__ import annotations

from dataclasses import dataclass

STREAK_FREEZE_POTION = "STREAK_FREEZE_POTION"
STREAK_REVIVAL_ELIXIR = "STREAK_REVIVAL_ELIXIR"

ITEM_TYPE_CONSUMABLE = "consumable"
ITEM_TYPE_PERMANENT_UNLOCK = "permanent_unlock"
ITEM_TYPES = frozenset({ITEM_TYPE_CONSUMABLE, ITEM_TYPE_PERMANENT_UNLOCK})

# Counters a purchase side-effect may touch. Currencies are excluded.
MUTABLE_STATE_FIELDS = frozenset({"streak_freezes"})


@dataclass(frozen=True, slots=True)
class ShopItemSpec:
    item_id: str
    name: str
    cost_in_gems: int
    category: str
    item_type: str
    description: str
    is_disabled: bool = False


@dataclass(frozen=True, slots=True)
class StateMutation:
    field: str
    delta: int
    per_unit: bool


SEED_ITEMS: tuple[ShopItemSpec, ...] = (
    ShopItemSpec(
        item_id=STREAK_FREEZE_POTION,
        name="Streak Freeze Potion",
        cost_in_gems=300,
        category="potion",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Protects your streak for one day of inactivity. You can hold multiple.",
    ),
    ShopItemSpec(
        item_id=STREAK_REVIVAL_ELIXIR,
        name="Streak Revival Elixir",
        cost_in_gems=800,
        category="potion",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Lost your streak in the last 48 hours? Use this to bring it back!",
    ),
    ShopItemSpec(
        item_id="AI_WISDOM_BOOST",
        name="AI Wisdom Boost",
        cost_in_gems=400,
        category="boost",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Get an extra, in-depth tip from the AI Coach after your next workout.",
    ),
    ShopItemSpec(
        item_id="TIME_TURNER",
        name="Time Turner",
        cost_in_gems=500,
        category="utility",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Extends the deadline for your daily goal by 3 hours. Use it before midnight!",
        is_disabled=True,
    ),
    ShopItemSpec(
        item_id="MOTIVATION_DROP",
        name="Motivation Drop",
        cost_in_gems=300,
        category="boost",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Get an instant, powerful motivational quote from our AI tailored to your goals.",
    ),
    ShopItemSpec(
        item_id="RECOVERY_KIT",
        name="Recovery Kit",
        cost_in_gems=1000,
        category="utility",
        item_type=ITEM_TYPE_PERMANENT_UNLOCK,
        description='Permanently unlocks the advanced "AI Post-Activity Recovery" feature.',
        is_disabled=True,
    ),
    ShopItemSpec(
        item_id="MYSTERY_BOX",
        name="Mystery Box",
        cost_in_gems=1200,
        category="mystery",
        item_type=ITEM_TYPE_CONSUMABLE,
        description="Contains a random assortment of gems, XP, or even a rare item!",
        is_disabled=True,
    ),
)

ITEM_SIDE_EFFECTS: dict[str, tuple[StateMutation, ...]] = {
    STREAK_FREEZE_POTION: (StateMutation(field="streak_freezes", delta=1, per_unit=True),),
    # The elixir ships with one bonus freeze per purchase, independent of quantity.
    STREAK_REVIVAL_ELIXIR: (StateMutation(field="streak_freezes", delta=1, per_unit=False),),
}


def _validate_side_effects(table: dict[str, tuple[StateMutation, ...]]) -> None:
    for item_id, mutations in table.items():
        for mutation in mutations:
            if mutation.field not in MUTABLE_STATE_FIELDS:
                raise ValueError(f"side effect for {item_id} targets unsupported field {mutation.field}")
            if mutation.delta <= 0:
                raise ValueError(f"side effect for {item_id} must grant a positive delta")


_validate_side_effects(ITEM_SIDE_EFFECTS)


def get_side_effects(item_id: str) -> tuple[StateMutation, ...]:
    return ITEM_SIDE_EFFECTS.get(item_id, ())


def get_seed_item(item_id: str) -> ShopItemSpec | None:
    for seed in SEED_ITEMS:
        if seed.item_id == item_id:
            return seed
    return None


def build_image_url(*, base_url: str, item_id: str) -> str:
    base = base_url.strip().rstrip("/")
    if not base:
        return ""
    return f"{base}/shop-items/{item_id}.png"
