from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fitstreak.db.repo.gamification_repo import GamificationRepo
from fitstreak.db.repo.users_repo import UsersRepo

logger = structlog.get_logger(__name__)
DEFAULT_LANGUAGE = "en"


@dataclass(slots=True)
class ProvisionedUser:
    user_id: str
    created: bool
    gems_balance: int
    current_streak: int


class UserProvisioningService:
    @staticmethod
    async def ensure_user(
        session: AsyncSession,
        *,
        user_id: str,
        username: str | None,
        now_utc: datetime,
        preferred_language: str | None = None,
    ) -> ProvisionedUser:
        user, created = await UsersRepo.get_or_create(
            session,
            user_id=user_id,
            username=username,
            preferred_language=preferred_language or DEFAULT_LANGUAGE,
            now_utc=now_utc,
        )
        if not created and username is not None and user.username != username:
            user.username = username
            user.updated_at = now_utc

        state = await GamificationRepo.get_or_create_state(session, user_id=user_id, now_utc=now_utc)

        if created:
            logger.info("user_provisioned", user_id=user_id)
        return ProvisionedUser(
            user_id=user.id,
            created=created,
            gems_balance=state.gems_balance,
            current_streak=state.current_streak,
        )
