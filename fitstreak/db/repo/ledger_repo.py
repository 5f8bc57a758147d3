from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.ledger_entries import LedgerEntry


class LedgerRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: LedgerEntry) -> LedgerEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def list_for_user(session: AsyncSession, user_id: str) -> list[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.user_id == user_id)
            .order_by(LedgerEntry.created_at.asc(), LedgerEntry.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def sum_amount(
        session: AsyncSession,
        *,
        user_id: str,
        asset: str,
        direction: str,
    ) -> int:
        stmt = select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(
            LedgerEntry.user_id == user_id,
            LedgerEntry.asset == asset,
            LedgerEntry.direction == direction,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
