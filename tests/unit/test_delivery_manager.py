"""Tests for DeliveryManager retry behaviour."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from kubenotify.errors import TerminalDeliveryError, TransientDeliveryError
from kubenotify.models.notifications import DeliveryReceipt, NotificationPayload
from kubenotify.notifications.manager import DeliveryManager, NotificationChannel

_PAYLOAD = NotificationPayload(fallback_text="pod killed")
_RECEIPT = DeliveryReceipt(channel="C0123", ts="1741089600.000100")


class _ScriptedChannel(NotificationChannel):
    """Channel that replays a fixed sequence of outcomes."""

    def __init__(self, outcomes: list[DeliveryReceipt | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0
        self.closed = False

    @property
    def channel_name(self) -> str:
        return "scripted"

    async def send(self, payload: NotificationPayload) -> DeliveryReceipt:
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class TestDeliver:
    async def test_success_first_try(self) -> None:
        channel = _ScriptedChannel([_RECEIPT])
        manager = DeliveryManager(channel)
        assert await manager.deliver(_PAYLOAD) == _RECEIPT
        assert channel.calls == 1

    async def test_no_retries_by_default(self) -> None:
        channel = _ScriptedChannel([TransientDeliveryError("503"), _RECEIPT])
        manager = DeliveryManager(channel)
        with pytest.raises(TransientDeliveryError):
            await manager.deliver(_PAYLOAD)
        assert channel.calls == 1

    async def test_transient_error_retried(self) -> None:
        sleep = AsyncMock()
        channel = _ScriptedChannel([TransientDeliveryError("503"), _RECEIPT])
        manager = DeliveryManager(channel, max_retries=2, sleep=sleep)

        assert await manager.deliver(_PAYLOAD) == _RECEIPT
        assert channel.calls == 2
        sleep.assert_not_awaited()

    async def test_server_retry_after_is_honoured(self) -> None:
        sleep = AsyncMock()
        channel = _ScriptedChannel([TransientDeliveryError("429", retry_after=3.0), _RECEIPT])
        manager = DeliveryManager(channel, max_retries=1, sleep=sleep)

        await manager.deliver(_PAYLOAD)
        sleep.assert_awaited_once_with(3.0)

    async def test_retries_exhausted_reraises_last_error(self) -> None:
        last = TransientDeliveryError("still down")
        channel = _ScriptedChannel([TransientDeliveryError("down"), last])
        manager = DeliveryManager(channel, max_retries=1, sleep=AsyncMock())

        with pytest.raises(TransientDeliveryError) as exc_info:
            await manager.deliver(_PAYLOAD)
        assert exc_info.value is last
        assert channel.calls == 2

    async def test_terminal_error_not_retried(self) -> None:
        channel = _ScriptedChannel([TerminalDeliveryError("invalid_auth"), _RECEIPT])
        manager = DeliveryManager(channel, max_retries=3, sleep=AsyncMock())

        with pytest.raises(TerminalDeliveryError):
            await manager.deliver(_PAYLOAD)
        assert channel.calls == 1

    async def test_stop_closes_channel(self) -> None:
        channel = _ScriptedChannel([])
        await DeliveryManager(channel).stop()
        assert channel.closed is True
