from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.shop_items import ShopItem


class ShopItemsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, item_id: str) -> ShopItem | None:
        return await session.get(ShopItem, item_id)

    @staticmethod
    async def list_items(session: AsyncSession, *, include_disabled: bool) -> list[ShopItem]:
        stmt = select(ShopItem).order_by(
            ShopItem.is_disabled.asc(),
            ShopItem.cost_in_gems.asc(),
            ShopItem.id.asc(),
        )
        if not include_disabled:
            stmt = stmt.where(ShopItem.is_disabled.is_(False))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def map_by_ids(session: AsyncSession, item_ids: Sequence[str]) -> dict[str, ShopItem]:
        ids = tuple(set(item_ids))
        if not ids:
            return {}
        stmt = select(ShopItem).where(ShopItem.id.in_(ids))
        result = await session.execute(stmt)
        return {item.id: item for item in result.scalars().all()}

    @staticmethod
    async def create(session: AsyncSession, *, item: ShopItem) -> ShopItem:
        session.add(item)
        await session.flush()
        return item
