from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from fitstreak.services import alerts


class _Response:
    def raise_for_status(self) -> None:
        return None


class _Client:
    def __init__(self, calls: list[dict[str, Any]], *, fail_urls: set[str] | None = None) -> None:
        self._calls = calls
        self._fail_urls = fail_urls or set()

    async def __aenter__(self) -> "_Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def post(self, url: str, json: dict[str, object]) -> _Response:
        self._calls.append({"url": url, "json": json})
        if url in self._fail_urls:
            raise RuntimeError("delivery failed")
        return _Response()


def _settings(**overrides: object) -> SimpleNamespace:
    base = {
        "app_env": "test",
        "ops_alert_webhook_url": "",
        "ops_alert_slack_webhook_url": "",
    }
    base.update(overrides)
    return SimpleNamespace(**base)


def _patch_http_client(
    monkeypatch: pytest.MonkeyPatch,
    calls: list[dict[str, Any]],
    *,
    fail_urls: set[str] | None = None,
) -> None:
    def factory(timeout: float) -> _Client:  # noqa: ARG001
        return _Client(calls, fail_urls=fail_urls)

    monkeypatch.setattr(alerts.httpx, "AsyncClient", factory)


@pytest.mark.asyncio
async def test_send_ops_alert_returns_false_when_no_targets_configured(monkeypatch) -> None:
    monkeypatch.setattr(alerts, "get_settings", lambda: _settings())
    sent = await alerts.send_ops_alert(event="gamification_reconcile_failures_detected", payload={"k": "v"})
    assert sent is False


@pytest.mark.asyncio
async def test_reconcile_failures_go_to_slack_then_generic(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(
            ops_alert_webhook_url="https://ops.example.local/hook",
            ops_alert_slack_webhook_url="https://slack.example.local/hook",
        ),
    )
    _patch_http_client(monkeypatch, calls)

    sent = await alerts.send_ops_alert(
        event="gamification_reconcile_failures_detected",
        payload={"users_failed": 2},
    )

    assert sent is True
    assert [call["url"] for call in calls] == [
        "https://slack.example.local/hook",
        "https://ops.example.local/hook",
    ]
    assert calls[0]["json"]["text"] == "[ERROR] gamification_reconcile_failures_detected"
    assert calls[1]["json"]["severity"] == "error"
    assert calls[1]["json"]["environment"] == "test"
    assert calls[1]["json"]["payload"] == {"users_failed": 2}


@pytest.mark.asyncio
async def test_unknown_event_uses_generic_warning_route(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(
            ops_alert_webhook_url="https://ops.example.local/hook",
            ops_alert_slack_webhook_url="https://slack.example.local/hook",
        ),
    )
    _patch_http_client(monkeypatch, calls)

    sent = await alerts.send_ops_alert(event="something_else", payload={})

    assert sent is True
    assert len(calls) == 1
    assert calls[0]["json"]["severity"] == "warning"


@pytest.mark.asyncio
async def test_reconcile_failures_fall_back_to_generic_when_slack_is_unset(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(ops_alert_webhook_url="https://ops.example.local/hook"),
    )
    _patch_http_client(monkeypatch, calls)

    sent = await alerts.send_ops_alert(event="gamification_reconcile_failures_detected", payload={})

    assert sent is True
    assert [call["url"] for call in calls] == ["https://ops.example.local/hook"]
    assert calls[0]["json"]["severity"] == "error"


@pytest.mark.asyncio
async def test_reconcile_failures_use_slack_alone_when_generic_is_unset(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(ops_alert_slack_webhook_url="https://slack.example.local/hook"),
    )
    _patch_http_client(monkeypatch, calls)

    sent = await alerts.send_ops_alert(event="gamification_reconcile_failures_detected", payload={"pages_failed": 1})

    assert sent is True
    assert [call["url"] for call in calls] == ["https://slack.example.local/hook"]
    assert calls[0]["json"]["attachments"][0]["color"] == alerts.SEVERITY_COLOR["error"]


@pytest.mark.asyncio
async def test_partial_delivery_failure_still_counts_as_sent(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(
            ops_alert_webhook_url="https://ops.example.local/hook",
            ops_alert_slack_webhook_url="https://slack.example.local/hook",
        ),
    )
    _patch_http_client(monkeypatch, calls, fail_urls={"https://slack.example.local/hook"})

    sent = await alerts.send_ops_alert(event="gamification_reconcile_failures_detected", payload={})

    assert sent is True
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_all_deliveries_failing_returns_false(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        alerts,
        "get_settings",
        lambda: _settings(ops_alert_webhook_url="https://ops.example.local/hook"),
    )
    _patch_http_client(monkeypatch, calls, fail_urls={"https://ops.example.local/hook"})

    sent = await alerts.send_ops_alert(event="gamification_reconcile_failures_detected", payload={})

    assert sent is False
