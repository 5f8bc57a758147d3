from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.owned_items import OwnedItem


class OwnedItemsRepo:
    @staticmethod
    async def get(session: AsyncSession, *, user_id: str, item_id: str) -> OwnedItem | None:
        return await session.get(OwnedItem, (user_id, item_id))

    @staticmethod
    async def list_for_user(session: AsyncSession, user_id: str) -> list[OwnedItem]:
        stmt = (
            select(OwnedItem)
            .where(OwnedItem.user_id == user_id)
            .order_by(OwnedItem.purchased_at.asc(), OwnedItem.shop_item_id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_or_create(
        session: AsyncSession,
        *,
        user_id: str,
        item_id: str,
        now_utc: datetime,
    ) -> OwnedItem:
        """Returns the inventory row, inserting an empty one first when missing.

        The insert tolerates a concurrent creator; `purchased_at` keeps the first writer's value.
        """
        stmt = (
            insert(OwnedItem)
            .values(
                user_id=user_id,
                shop_item_id=item_id,
                quantity=0,
                purchased_at=now_utc,
                updated_at=now_utc,
                version=1,
            )
            .on_conflict_do_nothing(index_elements=[OwnedItem.user_id, OwnedItem.shop_item_id])
        )
        await session.execute(stmt)

        result = await session.execute(
            select(OwnedItem)
            .where(OwnedItem.user_id == user_id, OwnedItem.shop_item_id == item_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
