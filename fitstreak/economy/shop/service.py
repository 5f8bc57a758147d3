from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.ledger_entries import LedgerEntry
from fitstreak.db.models.shop_items import ShopItem
from fitstreak.db.repo.gamification_repo import GamificationRepo
from fitstreak.db.repo.ledger_repo import LedgerRepo
from fitstreak.db.repo.owned_items_repo import OwnedItemsRepo
from fitstreak.db.repo.shop_items_repo import ShopItemsRepo
from fitstreak.economy.errors import ShopItemNotFoundError, UserNotFoundError
from fitstreak.economy.shop.catalog import SEED_ITEMS, build_image_url
from fitstreak.economy.shop.rules import apply_purchase, ensure_item_enabled, total_cost, validate_quantity
from fitstreak.economy.shop.types import OwnedItemView, PurchaseResult, ShopItemView
from fitstreak.economy.state import apply_snapshot_to_model, snapshot_from_model

logger = structlog.get_logger(__name__)

MUTATION_LEDGER_ASSETS = {"streak_freezes": "STREAK_FREEZE"}


def _item_view(item: ShopItem) -> ShopItemView:
    return ShopItemView(
        id=item.id,
        name=item.name,
        description=item.description,
        image_url=item.image_url,
        category=item.category,
        type=item.item_type,
        cost_in_gems=item.cost_in_gems,
        is_disabled=item.is_disabled,
    )


class ShopService:
    @staticmethod
    async def purchase_item(
        session: AsyncSession,
        *,
        user_id: str,
        item_id: str,
        quantity: object,
        now_utc: datetime,
    ) -> PurchaseResult:
        item = await ShopItemsRepo.get_by_id(session, item_id)
        if item is None:
            raise ShopItemNotFoundError
        ensure_item_enabled(item)
        units = validate_quantity(quantity)

        state = await GamificationRepo.get_by_user_id(session, user_id)
        if state is None:
            raise UserNotFoundError

        snapshot, applied = apply_purchase(snapshot_from_model(state), item=item, quantity=units)
        apply_snapshot_to_model(state, snapshot, now_utc)
        # The versioned balance row is written first so a lost race aborts before inventory is touched.
        await session.flush()

        owned = await OwnedItemsRepo.get_or_create(
            session,
            user_id=user_id,
            item_id=item.id,
            now_utc=now_utc,
        )
        owned.quantity += units
        owned.updated_at = now_utc
        await session.flush()

        cost = total_cost(item, units)
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=user_id,
                entry_type="SHOP_PURCHASE",
                asset="GEMS",
                direction="DEBIT",
                amount=cost,
                balance_after=snapshot.gems_balance,
                source="SHOP",
                item_id=item.id,
                metadata_={"quantity": units, "unit_cost": item.cost_in_gems},
                created_at=now_utc,
            ),
        )
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=user_id,
                entry_type="SHOP_PURCHASE",
                asset="SHOP_ITEM",
                direction="CREDIT",
                amount=units,
                balance_after=owned.quantity,
                source="SHOP",
                item_id=item.id,
                metadata_={},
                created_at=now_utc,
            ),
        )
        for mutation in applied:
            await LedgerRepo.create(
                session,
                entry=LedgerEntry(
                    user_id=user_id,
                    entry_type="SHOP_ITEM_BONUS",
                    asset=MUTATION_LEDGER_ASSETS[mutation.field],
                    direction="CREDIT",
                    amount=mutation.amount,
                    balance_after=mutation.balance_after,
                    source="SHOP",
                    item_id=item.id,
                    metadata_={},
                    created_at=now_utc,
                ),
            )

        logger.info(
            "shop_item_purchased",
            user_id=user_id,
            item_id=item.id,
            quantity=units,
            total_cost=cost,
            gems_balance=snapshot.gems_balance,
        )
        return PurchaseResult(
            success=True,
            message=f"Successfully purchased {item.name}!",
            item_id=item.id,
            quantity=units,
            total_cost=cost,
            gems_balance=snapshot.gems_balance,
            owned_quantity=owned.quantity,
            streak_freezes=snapshot.streak_freezes,
        )

    @staticmethod
    async def get_shop_catalog(
        session: AsyncSession,
        *,
        include_disabled: bool = False,
    ) -> list[ShopItemView]:
        items = await ShopItemsRepo.list_items(session, include_disabled=include_disabled)
        return [_item_view(item) for item in items]

    @staticmethod
    async def get_owned_items(session: AsyncSession, *, user_id: str) -> list[OwnedItemView]:
        owned_rows = await OwnedItemsRepo.list_for_user(session, user_id)
        catalog = await ShopItemsRepo.map_by_ids(session, [row.shop_item_id for row in owned_rows])

        views: list[OwnedItemView] = []
        for row in owned_rows:
            item = catalog.get(row.shop_item_id)
            if item is None:
                logger.warning("owned_item_missing_from_catalog", user_id=user_id, item_id=row.shop_item_id)
                continue
            base = _item_view(item)
            views.append(
                OwnedItemView(
                    id=base.id,
                    name=base.name,
                    description=base.description,
                    image_url=base.image_url,
                    category=base.category,
                    type=base.type,
                    cost_in_gems=base.cost_in_gems,
                    is_disabled=base.is_disabled,
                    quantity=row.quantity,
                    purchased_at=row.purchased_at,
                )
            )
        return views

    @staticmethod
    async def seed_catalog(
        session: AsyncSession,
        *,
        now_utc: datetime,
        image_base_url: str,
    ) -> int:
        for seed in SEED_ITEMS:
            image_url = build_image_url(base_url=image_base_url, item_id=seed.item_id)
            item = await ShopItemsRepo.get_by_id(session, seed.item_id)
            if item is None:
                await ShopItemsRepo.create(
                    session,
                    item=ShopItem(
                        id=seed.item_id,
                        name=seed.name,
                        description=seed.description,
                        cost_in_gems=seed.cost_in_gems,
                        category=seed.category,
                        item_type=seed.item_type,
                        is_disabled=seed.is_disabled,
                        image_url=image_url,
                        created_at=now_utc,
                        updated_at=now_utc,
                    ),
                )
                continue

            item.name = seed.name
            item.description = seed.description
            item.cost_in_gems = seed.cost_in_gems
            item.category = seed.category
            item.item_type = seed.item_type
            item.is_disabled = seed.is_disabled
            item.image_url = image_url
            item.updated_at = now_utc

        await session.flush()
        logger.info("shop_catalog_seeded", items=len(SEED_ITEMS))
        return len(SEED_ITEMS)
