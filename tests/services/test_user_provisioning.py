from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from fitstreak.services import user_provisioning

NOW_UTC = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_ensure_user_creates_user_and_default_state(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def _get_or_create_user(
        session,
        *,
        user_id: str,
        username,
        preferred_language: str,
        now_utc: datetime,
    ):
        del session
        captured["user"] = (user_id, username, preferred_language, now_utc)
        return SimpleNamespace(id=user_id, username=username), True

    async def _get_or_create_state(session, *, user_id: str, now_utc: datetime):
        del session
        captured["state"] = (user_id, now_utc)
        return SimpleNamespace(gems_balance=0, current_streak=0)

    monkeypatch.setattr(user_provisioning.UsersRepo, "get_or_create", _get_or_create_user)
    monkeypatch.setattr(user_provisioning.GamificationRepo, "get_or_create_state", _get_or_create_state)

    result = await user_provisioning.UserProvisioningService.ensure_user(
        object(),
        user_id="user-1",
        username="runner",
        now_utc=NOW_UTC,
    )

    assert result == user_provisioning.ProvisionedUser(
        user_id="user-1",
        created=True,
        gems_balance=0,
        current_streak=0,
    )
    assert captured == {
        "user": ("user-1", "runner", "en", NOW_UTC),
        "state": ("user-1", NOW_UTC),
    }


@pytest.mark.asyncio
async def test_ensure_user_is_idempotent_for_existing_user(monkeypatch) -> None:
    existing_user = SimpleNamespace(id="user-1", username="old", updated_at=None)

    async def _get_or_create_user(session, *, user_id: str, username, preferred_language: str, now_utc: datetime):
        del session, user_id, username, preferred_language, now_utc
        return existing_user, False

    async def _get_or_create_state(session, *, user_id: str, now_utc: datetime):
        del session, user_id, now_utc
        return SimpleNamespace(gems_balance=420, current_streak=6)

    monkeypatch.setattr(user_provisioning.UsersRepo, "get_or_create", _get_or_create_user)
    monkeypatch.setattr(user_provisioning.GamificationRepo, "get_or_create_state", _get_or_create_state)

    result = await user_provisioning.UserProvisioningService.ensure_user(
        object(),
        user_id="user-1",
        username="new",
        now_utc=NOW_UTC,
    )

    assert result.created is False
    assert result.gems_balance == 420
    assert existing_user.username == "new"
    assert existing_user.updated_at == NOW_UTC


@pytest.mark.asyncio
async def test_ensure_user_keeps_username_when_none_is_given(monkeypatch) -> None:
    existing_user = SimpleNamespace(id="user-1", username="runner", updated_at=None)

    async def _get_or_create_user(session, *, user_id: str, username, preferred_language: str, now_utc: datetime):
        del session, user_id, username, preferred_language, now_utc
        return existing_user, False

    async def _get_or_create_state(session, *, user_id: str, now_utc: datetime):
        del session, user_id, now_utc
        return SimpleNamespace(gems_balance=0, current_streak=0)

    monkeypatch.setattr(user_provisioning.UsersRepo, "get_or_create", _get_or_create_user)
    monkeypatch.setattr(user_provisioning.GamificationRepo, "get_or_create_state", _get_or_create_state)

    await user_provisioning.UserProvisioningService.ensure_user(
        object(),
        user_id="user-1",
        username=None,
        now_utc=NOW_UTC,
    )

    assert existing_user.username == "runner"
    assert existing_user.updated_at is None
