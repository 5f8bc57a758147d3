from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: str) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_or_create(
        session: AsyncSession,
        *,
        user_id: str,
        username: str | None,
        preferred_language: str,
        now_utc: datetime,
    ) -> tuple[User, bool]:
        """Returns the user row and whether this call inserted it.

        A concurrent creator of the same id wins silently; the loser reads the committed row.
        """
        stmt = (
            insert(User)
            .values(
                id=user_id,
                username=username,
                preferred_language=preferred_language,
                created_at=now_utc,
                updated_at=now_utc,
            )
            .on_conflict_do_nothing(index_elements=[User.id])
            .returning(User.id)
        )
        inserted_id = await session.scalar(stmt)

        result = await session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one(), inserted_id is not None
